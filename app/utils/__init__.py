"""Pure helpers (dates, formatting, numbering) shared by the services."""
