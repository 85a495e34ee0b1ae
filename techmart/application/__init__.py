"""
===============================================================================
APPLICATION LAYER
===============================================================================

Casos de uso de identidad y catálogo.

Nota:
  - Los casos de uso se importan desde `usecases/` (auth, catalog).
  - Cada caso de uso recibe sus puertos por constructor (ver container.py).
===============================================================================
"""
