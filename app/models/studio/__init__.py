from app.models.studio.studio_settings import StudioSettings, SETTINGS_ROW_ID

__all__ = ["StudioSettings", "SETTINGS_ROW_ID"]
