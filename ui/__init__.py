"""Server and client-side session controller for Photo Poet."""
