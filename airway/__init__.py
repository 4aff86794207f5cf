"""2D geometry service for laryngoscope-assisted tracheal intubation."""
