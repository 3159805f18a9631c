"""Domain services: validation, uploads, QR and HTML rendering."""
