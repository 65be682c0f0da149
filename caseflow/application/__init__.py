"""Application layer: ports, DTOs and pure workflow services."""
