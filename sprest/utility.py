"""Utilities namespace API: sending e-mail."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from sprest.utils import RequestConfig, Transport, _dumps, get_prior_endpoint, trim_multiline


@dataclass
class EmailProps:
    """Options for :meth:`Utility.send_email`."""

    subject: str = ""
    body: str = ""
    to: list[str] = field(default_factory=list)
    cc: list[str] = field(default_factory=list)
    bcc: list[str] = field(default_factory=list)
    sender: str = ""


class Utility:
    """SharePoint utilities endpoint."""

    def __init__(
        self, transport: Transport, endpoint: str, config: RequestConfig | None = None
    ) -> None:
        self.transport = transport
        self.endpoint = endpoint
        self.config = config

    def send_email(self, options: EmailProps) -> None:
        """Send an e-mail through the site."""
        endpoint = (
            f"{get_prior_endpoint(self.endpoint, '/_api')}/_api/SP.Utilities.Utility.SendEmail"
        )
        properties: dict[str, Any] = {
            "__metadata": {"type": "SP.Utilities.EmailProperties"},
            "Subject": options.subject,
            "Body": options.body,
        }
        if options.sender:
            properties["From"] = options.sender
        for key, addresses in (("To", options.to), ("CC", options.cc), ("BCC", options.bcc)):
            if addresses:
                properties[key] = {"results": list(addresses)}
        props = _dumps(properties).decode("utf-8")
        body = trim_multiline('{ "properties": ' + props + "}").encode("utf-8")
        self.transport.post(endpoint, body, self.config)