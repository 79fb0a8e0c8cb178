"""Page objects for the When2Meet event page."""
