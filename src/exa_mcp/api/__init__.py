"""HTTP surface for the server-sent-events transport."""
