"""Implementaciones concretas de los contratos del Core (procesos, ficheros)."""
