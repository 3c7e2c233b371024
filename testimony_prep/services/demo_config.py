"""Demo mode configuration payload for clients"""

from typing import List

from pydantic import BaseModel

from testimony_prep.utils.config import Settings, limit_descriptions


class DemoFeatures(BaseModel):
    enable_export: bool = False
    enable_bulk_upload: bool = False
    enable_advanced_search: bool = False
    enable_customization: bool = False
    enable_api_access: bool = False


class DemoConfig(BaseModel):
    is_demo_mode: bool
    app_name: str
    upgrade_url: str
    contact_email: str
    demo_expiry_days: int
    features: DemoFeatures


FEATURE_LABELS = [
    ("enable_export", "Session Export"),
    ("enable_bulk_upload", "Bulk Upload"),
    ("enable_advanced_search", "Advanced Search"),
    ("enable_customization", "Custom Question Sets"),
    ("enable_api_access", "API Access"),
]


def demo_features(settings: Settings) -> DemoFeatures:
    return DemoFeatures(
        enable_export=settings.demo_feature_export,
        enable_bulk_upload=settings.demo_feature_bulk_upload,
        enable_advanced_search=settings.demo_feature_advanced_search,
        enable_customization=settings.demo_feature_customization,
        enable_api_access=settings.demo_feature_api_access,
    )


def disabled_features(features: DemoFeatures) -> List[str]:
    """Display names of the features switched off in this deployment"""
    return [label for name, label in FEATURE_LABELS if not getattr(features, name)]


def build_demo_config(settings: Settings) -> dict:
    """Config, limits and descriptions as served to the UI"""
    features = demo_features(settings)
    config = DemoConfig(
        is_demo_mode=settings.demo_mode,
        app_name=settings.demo_app_name,
        upgrade_url=settings.demo_upgrade_url,
        contact_email=settings.demo_contact_email,
        demo_expiry_days=settings.demo_expiry_days,
        features=features,
    )
    return {
        "config": config.model_dump(),
        "limits": {
            "pricing": {
                "session_price_limit": settings.demo_session_price_limit,
                "session_duration_hours": settings.demo_session_hours,
                "price_per_thousand_chars": settings.demo_price_per_thousand_chars,
            },
            "documents": {
                "max_documents_per_session": settings.demo_max_documents_per_session,
                "max_file_size": settings.demo_max_file_size,
            },
        },
        "limit_descriptions": limit_descriptions(settings),
        "disabled_features": disabled_features(features),
    }
