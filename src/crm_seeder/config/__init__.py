from crm_seeder.config.settings import AppSettings, get_settings  # noqa: F401
