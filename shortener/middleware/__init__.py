"""HTTP middleware for the URL shortener application."""
