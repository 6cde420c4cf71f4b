"""Domain core: models, repositories, schemas, services and logging setup."""
