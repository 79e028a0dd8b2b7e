"""Minnesota Business Directory API."""
