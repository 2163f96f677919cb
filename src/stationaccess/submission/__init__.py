"""New-report submission: validation, geolocation, multipart encoding."""
