"""Resource templates for tenant namespaces.

Pure builders producing the declarative specifications applied to every
tenant namespace: a resource quota, a container limit range, and a
deny-by-default set of network policies. Specifications are immutable,
validated on construction, and rendered to Kubernetes API bodies with
``to_manifest()``; nothing here performs I/O.

Pod label selectors follow the release chart's labeling convention
``app: <release>-<component>``. That convention is assumed, not verified
against the deployed chart: if a chart changes its labels, the allow
rules stop matching and isolation silently fails open or closed.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Mapping

from provisioning.domain.value_objects import TenantKind, is_dns_label

QUOTA_NAME = "tenant-quota"
LIMIT_RANGE_NAME = "tenant-limit-range"

DENY_ALL_POLICY = "deny-all"
ALLOW_WEB_INGRESS_POLICY = "allow-web-ingress"
ALLOW_INTERNAL_DB_POLICY = "allow-internal-db"

APP_LABEL = "app"

# Platform-wide caps, not tenant-configurable.
QUOTA_HARD_LIMITS: dict[str, str] = {
    "pods": "10",
    "requests.cpu": "1",
    "requests.memory": "1Gi",
    "limits.cpu": "2",
    "limits.memory": "2Gi",
}
CONTAINER_DEFAULT_LIMITS: dict[str, str] = {"cpu": "250m", "memory": "256Mi"}
CONTAINER_DEFAULT_REQUESTS: dict[str, str] = {"cpu": "100m", "memory": "128Mi"}

_QUANTITY_PATTERN = re.compile(r"^[0-9]+(\.[0-9]+)?(m|k|M|G|T|Ki|Mi|Gi|Ti)?$")


def _validate_name(name: str) -> None:
    if not is_dns_label(name):
        raise ValueError(f"Invalid resource name: {name!r}")


def _validate_quantities(quantities: Mapping[str, str]) -> None:
    for key, quantity in quantities.items():
        if not _QUANTITY_PATTERN.match(quantity):
            raise ValueError(f"Invalid quantity for {key}: {quantity!r}")


@dataclass(frozen=True)
class ResourceQuotaSpec:
    """Hard caps on pod count and aggregate compute within a namespace."""

    name: str
    hard: dict[str, str]

    def __post_init__(self) -> None:
        _validate_name(self.name)
        _validate_quantities(self.hard)

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "ResourceQuota",
            "metadata": {"name": self.name},
            "spec": {"hard": dict(self.hard)},
        }


@dataclass(frozen=True)
class LimitRangeSpec:
    """Per-container default limits and requests within a namespace."""

    name: str
    default: dict[str, str]
    default_request: dict[str, str]

    def __post_init__(self) -> None:
        _validate_name(self.name)
        _validate_quantities(self.default)
        _validate_quantities(self.default_request)

    def to_manifest(self) -> dict[str, Any]:
        return {
            "apiVersion": "v1",
            "kind": "LimitRange",
            "metadata": {"name": self.name},
            "spec": {
                "limits": [
                    {
                        "type": "Container",
                        "default": dict(self.default),
                        "defaultRequest": dict(self.default_request),
                    }
                ]
            },
        }


@dataclass(frozen=True)
class IngressRule:
    """A single ingress rule.

    Attributes:
        from_pod_labels: Labels a source pod must carry. None admits any
            source, including traffic from outside the namespace.
    """

    from_pod_labels: dict[str, str] | None = None

    def admits(self, source_labels: Mapping[str, str] | None) -> bool:
        """Check whether traffic from a source is admitted by this rule.

        Args:
            source_labels: Labels of the source pod, or None for a source
                outside the namespace (e.g. the ingress controller)
        """
        if self.from_pod_labels is None:
            return True
        if source_labels is None:
            return False
        return _labels_match(self.from_pod_labels, source_labels)

    def to_manifest(self) -> dict[str, Any]:
        if self.from_pod_labels is None:
            return {}
        return {"from": [{"podSelector": {"matchLabels": dict(self.from_pod_labels)}}]}


@dataclass(frozen=True)
class NetworkPolicySpec:
    """Ingress policy applied to the pods matching ``pod_labels``.

    An empty ``pod_labels`` selects every pod in the namespace; an empty
    ``ingress`` tuple admits nothing.
    """

    name: str
    pod_labels: dict[str, str] = field(default_factory=dict)
    ingress: tuple[IngressRule, ...] = ()

    def __post_init__(self) -> None:
        _validate_name(self.name)

    def selects(self, pod_labels: Mapping[str, str]) -> bool:
        return _labels_match(self.pod_labels, pod_labels)

    def to_manifest(self) -> dict[str, Any]:
        pod_selector: dict[str, Any] = (
            {"matchLabels": dict(self.pod_labels)} if self.pod_labels else {}
        )
        return {
            "apiVersion": "networking.k8s.io/v1",
            "kind": "NetworkPolicy",
            "metadata": {"name": self.name},
            "spec": {
                "podSelector": pod_selector,
                "policyTypes": ["Ingress"],
                "ingress": [rule.to_manifest() for rule in self.ingress],
            },
        }


@dataclass(frozen=True)
class ReleaseTemplate:
    """How a tenant kind is deployed and labelled by its chart.

    Attributes:
        chart: Chart reference passed to the release tool
        title_key: Override key receiving the tenant's display name
        frontend_component: Component suffix of the web-facing pods
        database_component: Component suffix of the database pods
    """

    chart: str
    title_key: str
    frontend_component: str
    database_component: str


def build_quota() -> ResourceQuotaSpec:
    """Build the namespace resource quota."""
    return ResourceQuotaSpec(name=QUOTA_NAME, hard=dict(QUOTA_HARD_LIMITS))


def build_limit_range() -> LimitRangeSpec:
    """Build the per-container limit range."""
    return LimitRangeSpec(
        name=LIMIT_RANGE_NAME,
        default=dict(CONTAINER_DEFAULT_LIMITS),
        default_request=dict(CONTAINER_DEFAULT_REQUESTS),
    )


def build_network_policies(
    release_name: str,
    frontend_component: str = "wordpress",
    database_component: str = "mysql",
) -> tuple[NetworkPolicySpec, ...]:
    """Build the deny-by-default network policy set for a release.

    Produces, in order:
    1. deny-all: selects every pod, admits nothing
    2. allow-web-ingress: frontend pods admit any source
    3. allow-internal-db: database pods admit only the frontend pods

    Args:
        release_name: Release whose chart labels the pods
        frontend_component: Chart component name of the frontend pods
        database_component: Chart component name of the database pods

    Returns:
        Tuple of the three policy specifications
    """
    frontend = {APP_LABEL: f"{release_name}-{frontend_component}"}
    database = {APP_LABEL: f"{release_name}-{database_component}"}

    return (
        NetworkPolicySpec(name=DENY_ALL_POLICY),
        NetworkPolicySpec(
            name=ALLOW_WEB_INGRESS_POLICY,
            pod_labels=frontend,
            ingress=(IngressRule(),),
        ),
        NetworkPolicySpec(
            name=ALLOW_INTERNAL_DB_POLICY,
            pod_labels=database,
            ingress=(IngressRule(from_pod_labels=frontend),),
        ),
    )


def build_release_templates(
    woocommerce_chart: str,
    medusa_chart: str,
) -> dict[TenantKind, ReleaseTemplate]:
    """Build the release template for every tenant kind.

    Args:
        woocommerce_chart: Chart reference for WooCommerce stores
        medusa_chart: Chart reference for the Medusa stub

    Returns:
        Mapping of tenant kind to its release template
    """
    return {
        TenantKind.WOOCOMMERCE: ReleaseTemplate(
            chart=woocommerce_chart,
            title_key="wordpress.title",
            frontend_component="wordpress",
            database_component="mysql",
        ),
        TenantKind.MEDUSA_STUB: ReleaseTemplate(
            chart=medusa_chart,
            title_key="medusa.storeName",
            frontend_component="medusa",
            database_component="postgres",
        ),
    }


def is_ingress_allowed(
    policies: tuple[NetworkPolicySpec, ...] | list[NetworkPolicySpec],
    target_labels: Mapping[str, str],
    source_labels: Mapping[str, str] | None,
) -> bool:
    """Evaluate ingress to a pod under a policy set.

    Follows NetworkPolicy semantics: a pod selected by no policy is not
    isolated; a selected pod admits traffic only if some selecting policy
    has a rule admitting the source.

    Args:
        policies: Policies in the pod's namespace
        target_labels: Labels of the receiving pod
        source_labels: Labels of the sending pod in the same namespace,
            or None for any other source
    """
    selecting = [policy for policy in policies if policy.selects(target_labels)]
    if not selecting:
        return True
    return any(
        rule.admits(source_labels) for policy in selecting for rule in policy.ingress
    )


def _labels_match(selector: Mapping[str, str], labels: Mapping[str, str]) -> bool:
    return all(labels.get(key) == value for key, value in selector.items())
