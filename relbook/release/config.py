from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ThirdPartyLink:
    """How a third-party workflow pin maps to an upstream release page."""

    env_var: str
    display_name: str
    repo: str  # owner/name
    tag_prefix: str = ""

    def release_url(self, version: str) -> str:
        return f"https://github.com/{self.repo}/releases/tag/{self.tag_prefix}{version}"


THIRD_PARTY_LINKS: tuple[ThirdPartyLink, ...] = (
    ThirdPartyLink("CERT_MANAGER_VERSION", "Cert Manager", "cert-manager/cert-manager"),
    ThirdPartyLink("CROSSPLANE_VERSION", "Crossplane", "crossplane/crossplane", "v"),
    ThirdPartyLink("GARDENER_ETCD_DRUID_SOURCE_REF", "etcd-druid", "gardener/etcd-druid"),
    ThirdPartyLink("GATEWAY_API_VERSION", "Gateway API", "kubernetes-sigs/gateway-api"),
    ThirdPartyLink("KCP_OPERATOR_VERSION", "KCP Operator", "kcp-dev/helm-charts", "kcp-operator-"),
    ThirdPartyLink("OPENFGA_VERSION", "OpenFGA", "openfga/helm-charts", "openfga-"),
    ThirdPartyLink("TRAEFIK_VERSION", "Traefik", "traefik/traefik-helm-chart", "v"),
)

# Chart sources in this repo are private; never link into it.
PRIVATE_CHART_REPO_MARKER = "helm-charts-priv"

GETTING_STARTED_URL = "https://platform-mesh.io/main/getting-started"
