"""Audio-driven camera shot scheduling."""
