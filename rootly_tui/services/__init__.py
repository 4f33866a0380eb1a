"""Services for talking to the Rootly API."""
