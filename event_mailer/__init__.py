"""Event mailer: transactional notification emails for event registration."""

__version__ = "0.1.0"
