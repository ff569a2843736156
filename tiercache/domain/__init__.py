"""Domain Layer: entry model, error taxonomy and the interfaces (ports)
implemented by the infrastructure layer."""
