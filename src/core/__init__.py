"""Core del instalador: dominio, configuración y servicios sin dependencias de UI."""
