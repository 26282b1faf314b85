"""Pure domain layer: models, errors, ports, encoding, parsing."""
