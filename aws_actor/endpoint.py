"""Endpoint URL construction for regional service APIs."""

from aws_actor.settings.constants import DEFAULT_PROVIDER_DOMAIN


def endpoint_host(
    region: str,
    service: str,
    provider_domain: str = DEFAULT_PROVIDER_DOMAIN,
) -> str:
    """Build the hostname of a regional service endpoint.

    Args:
        region: Region name, e.g. ``us-east-1``.
        service: Service endpoint prefix, e.g. ``dynamodb``.
        provider_domain: Provider DNS suffix.

    Returns:
        Hostname such as ``dynamodb.us-east-1.amazonaws.com``.
    """
    return f"{service}.{region}.{provider_domain}"


def build_endpoint(
    region: str,
    service: str,
    path: str,
    host: str | None = None,
    provider_domain: str = DEFAULT_PROVIDER_DOMAIN,
) -> str:
    """Build the HTTPS URL for a request.

    Inputs are used verbatim; no validation is performed.

    Args:
        region: Region name.
        service: Service endpoint prefix.
        path: Request path including any query string.
        host: Explicit host (and port) that replaces the regional host.
        provider_domain: Provider DNS suffix.

    Returns:
        The request URL.
    """
    if host is None:
        host = endpoint_host(region, service, provider_domain)
    return f"https://{host}{path}"
