"""Version 1 of the Khadmaty API."""
