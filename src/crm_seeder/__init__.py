"""Demo data seeder for the HubSpot CRM."""

__version__ = "0.1.0"
