"""Modelos y entidades del dominio.

Aquí viven los enums y modelos Pydantic del instalador. El dominio no conoce
subprocess, la CLI ni el sistema de ficheros: solo conceptos del problema.
"""
