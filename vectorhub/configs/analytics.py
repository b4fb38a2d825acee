"""
Analytics configuration settings.

Defaults for similarity search, clustering and anomaly detection requests
that do not specify their own parameters.

Dependencies: pydantic, pydantic_settings
System role: Analytics defaults
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from vectorhub.configs.base import BaseSettings


class AnalyticsSettings(BaseSettings):
    """Search, clustering and anomaly detection defaults."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ANALYTICS_",
        case_sensitive=False,
        extra="ignore",
    )

    # Search
    search_threshold: float = Field(default=0.7, ge=-1.0, le=1.0)
    search_limit: int = Field(default=10, gt=0)

    # Clustering
    default_cluster_count: int = Field(default=5, gt=0)
    kmeans_max_iterations: int = Field(default=100, gt=0)
    kmeans_distance_threshold: float = Field(default=0.001, ge=0.0)
    dbscan_epsilon: float = Field(default=0.2, gt=0.0)
    dbscan_min_points: int = Field(default=3, gt=0)

    # Anomaly detection
    anomaly_threshold: float = Field(default=0.8, ge=0.0, le=1.0)
    anomaly_method: str = Field(default="knn_distance")
    anomaly_neighbors: int = Field(default=5, gt=0)
