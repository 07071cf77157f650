"""Settings, logging and small helpers shared by the Pi Network client."""
