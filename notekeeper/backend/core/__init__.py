# Core infrastructure: config, logging, exceptions, database, concurrency
