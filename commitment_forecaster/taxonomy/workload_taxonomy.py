"""
Workload category taxonomy for cloud spend decomposition.

``WorkloadCategory`` enumerates the spend categories a commitment is consumed
through; ``CATEGORY_REGISTRY`` maps each one to its descriptive metadata
(display name, typical services, baseline annual growth rate).

``CATEGORY_REGISTRY`` is the canonical integrity contract:
  - Every ``WorkloadCategory`` must have an entry.
  - Every entry lists at least three typical services (the allocator
    breaks each category down into its top three).

``DEFAULT_DISTRIBUTION`` is the ordered share of run rate assigned to each
category by the workload allocator. Shares need not sum to 100; the
remainder is left unassigned.

This module has NO imports from any other ``commitment_forecaster`` package.
"""

from dataclasses import dataclass
from enum import StrEnum
from types import MappingProxyType
from typing import Mapping


class WorkloadCategory(StrEnum):
    """Spend category a workload consumes commitment through."""

    COMPUTE = "compute"
    STORAGE = "storage"
    NETWORKING = "networking"
    DATABASES = "databases"
    ANALYTICS = "analytics"
    AI_ML = "ai-ml"
    SECURITY = "security"
    IOT = "iot"
    CONTAINERS = "containers"
    OTHER = "other"


@dataclass(frozen=True)
class CategoryInfo:
    """Descriptive metadata for one ``WorkloadCategory``.

    Attributes:
        name:             Display label, e.g. ``"AI & Machine Learning"``.
        description:      One-line description of the category.
        typical_services: Representative services, most significant first.
        avg_growth_rate:  Baseline annual growth rate in percent.
    """

    name: str
    description: str
    typical_services: tuple[str, ...]
    avg_growth_rate: float


CATEGORY_REGISTRY: Mapping[WorkloadCategory, CategoryInfo] = MappingProxyType({
    WorkloadCategory.COMPUTE: CategoryInfo(
        name="Compute",
        description="Virtual machines, containers, and serverless compute",
        typical_services=("Virtual Machines", "App Service", "Functions", "Container Instances"),
        avg_growth_rate=15.0,
    ),
    WorkloadCategory.STORAGE: CategoryInfo(
        name="Storage",
        description="Blob, file, and disk storage",
        typical_services=("Blob Storage", "File Storage", "Managed Disks", "Archive Storage"),
        avg_growth_rate=25.0,
    ),
    WorkloadCategory.NETWORKING: CategoryInfo(
        name="Networking",
        description="Virtual networks, load balancers, and CDN",
        typical_services=("Virtual Network", "Load Balancer", "Application Gateway", "CDN"),
        avg_growth_rate=10.0,
    ),
    WorkloadCategory.DATABASES: CategoryInfo(
        name="Databases",
        description="Managed database services",
        typical_services=("SQL Database", "Cosmos DB", "PostgreSQL", "MySQL"),
        avg_growth_rate=20.0,
    ),
    WorkloadCategory.ANALYTICS: CategoryInfo(
        name="Analytics",
        description="Data analytics and business intelligence",
        typical_services=("Synapse Analytics", "Data Factory", "Databricks", "HDInsight"),
        avg_growth_rate=30.0,
    ),
    WorkloadCategory.AI_ML: CategoryInfo(
        name="AI & Machine Learning",
        description="AI services and machine learning",
        typical_services=("Azure OpenAI", "Cognitive Services", "Machine Learning", "Bot Service"),
        avg_growth_rate=50.0,
    ),
    WorkloadCategory.SECURITY: CategoryInfo(
        name="Security",
        description="Security and identity services",
        typical_services=("Microsoft Defender", "Key Vault", "Azure AD", "Sentinel"),
        avg_growth_rate=20.0,
    ),
    WorkloadCategory.IOT: CategoryInfo(
        name="IoT",
        description="Internet of Things services",
        typical_services=("IoT Hub", "IoT Central", "Digital Twins", "Time Series Insights"),
        avg_growth_rate=35.0,
    ),
    WorkloadCategory.CONTAINERS: CategoryInfo(
        name="Containers & Kubernetes",
        description="Container orchestration and management",
        typical_services=("AKS", "Container Apps", "Container Registry", "Service Fabric"),
        avg_growth_rate=40.0,
    ),
    WorkloadCategory.OTHER: CategoryInfo(
        name="Other Services",
        description="Miscellaneous cloud services",
        typical_services=("Logic Apps", "Event Grid", "Service Bus", "API Management"),
        avg_growth_rate=15.0,
    ),
})

# Typical enterprise distribution, in allocation order (percent of run rate).
DEFAULT_DISTRIBUTION: tuple[tuple[WorkloadCategory, float], ...] = (
    (WorkloadCategory.COMPUTE,    35.0),
    (WorkloadCategory.STORAGE,    15.0),
    (WorkloadCategory.DATABASES,  20.0),
    (WorkloadCategory.ANALYTICS,  10.0),
    (WorkloadCategory.AI_ML,       8.0),
    (WorkloadCategory.NETWORKING,  5.0),
    (WorkloadCategory.SECURITY,    4.0),
    (WorkloadCategory.CONTAINERS,  3.0),
)


def get_category_info(category: WorkloadCategory | str) -> CategoryInfo:
    """Look up registry metadata for a category enum member or slug.

    Raises:
        ValueError: If ``category`` is not a known slug.
    """
    return CATEGORY_REGISTRY[WorkloadCategory(category)]
