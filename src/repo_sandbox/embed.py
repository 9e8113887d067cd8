# Copyright (c) 2025 CoReason, Inc.
#
# This software is proprietary and dual-licensed.
# Licensed under the Prosperity Public License 3.0 (the "License").
# A copy of the license is available at https://prosperitylicense.com/versions/3.0.0
# For details, see the LICENSE file.
# Commercial use beyond a 30-day trial requires a separate license.
#
# Source Code: https://github.com/CoReason-AI/repo_sandbox

"""Embeddable viewer markup for sandboxes created by the sandbox host."""

from html import escape

IFRAME_ALLOW = (
    "accelerometer; ambient-light-sensor; camera; encrypted-media; geolocation; gyroscope; "
    "hid; microphone; midi; payment; usb; vr; xr-spatial-tracking"
)
IFRAME_SANDBOX = "allow-forms allow-modals allow-popups allow-presentation allow-same-origin allow-scripts"
IFRAME_STYLE = "width:100%; height:500px; border:0; border-radius: 4px; overflow:hidden;"


def embed_url(sandbox_host: str, sandbox_id: str, view: str = "split") -> str:
    """Returns the embed URL for a sandbox."""
    return f"{sandbox_host.rstrip('/')}/embed/{sandbox_id}?view={view}"


def render_iframe(url: str, title: str = "sandbox") -> str:
    """Renders iframe markup pointed at an embed URL.

    The allow and sandbox attributes are fixed allowlists.
    """
    return (
        f'<iframe src="{escape(url)}"\n'
        f'  style="{IFRAME_STYLE}"\n'
        f'  title="{escape(title)}"\n'
        f'  allow="{IFRAME_ALLOW}"\n'
        f'  sandbox="{IFRAME_SANDBOX}"\n'
        "></iframe>"
    )
