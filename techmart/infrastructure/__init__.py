"""
Infraestructura: adapters concretos de los puertos del dominio.

  - db/: pool psycopg
  - repositories/: Postgres e in-memory
  - cache.py: cache de productos (Redis / in-memory)
"""
