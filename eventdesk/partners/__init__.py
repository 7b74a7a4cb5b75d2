"""Client and supplier overviews."""
