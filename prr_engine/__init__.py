"""Public Records Request case lifecycle and deadline engine."""
