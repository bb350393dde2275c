"""Runtime settings for doc-reconcile.

Resolves settings from CLI args, environment variables, .env files and
the YAML config.

Precedence (highest to lowest):
    CLI args > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    DOC_RECONCILE_MAX_REVISIONS: Revisions kept per draft (optional, default: 50)
    DOC_RECONCILE_CURRENT_LABEL: Conflict label for the editor's side (optional)
    DOC_RECONCILE_INCOMING_LABEL: Conflict label for the agent's side (optional)
    DOC_RECONCILE_DEBUG: Enable debug logging (optional, default: false)
"""

import logging
import os
from dataclasses import dataclass

from .config_schema import UnifiedConfig
from .validators import validate_label

logger = logging.getLogger(__name__)


@dataclass
class Settings:
    max_revisions: int = 50
    current_label: str = "CURRENT"
    incoming_label: str = "INCOMING"
    debug: bool = False
    log_level: str = "INFO"
    log_file: str | None = None


def validate_settings(settings: Settings) -> None:
    """Validate settings values and raise ValueError if invalid.

    Args:
        settings: Settings instance to validate.

    Raises:
        ValueError: If a label is empty or multi-line, or the revision
            limit is out of range.
    """
    settings.current_label = settings.current_label.strip()
    settings.incoming_label = settings.incoming_label.strip()

    for name, label in (
        ("current_label", settings.current_label),
        ("incoming_label", settings.incoming_label),
    ):
        is_valid, error = validate_label(label)
        if not is_valid:
            raise ValueError(f"Invalid {name} '{label}': {error}")

    if settings.current_label == settings.incoming_label:
        logger.warning(
            "current_label and incoming_label are both '%s'; conflict "
            "markers will not tell the sides apart",
            settings.current_label,
        )

    if not (1 <= settings.max_revisions <= 1000):
        raise ValueError(
            f"Invalid max_revisions '{settings.max_revisions}': must be a number between 1 and 1000"
        )


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def load_settings(
    max_revisions: int | None = None,
    current_label: str | None = None,
    incoming_label: str | None = None,
    debug: bool = False,
    log_file: str | None = None,
    unified: UnifiedConfig | None = None,
) -> Settings:
    """Load settings with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI arg > env var / .env > YAML config > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        max_revisions: Override for the revision limit.
        current_label: Override for the editor-side conflict label.
        incoming_label: Override for the agent-side conflict label.
        debug: Enable debug logging (CLI flag).
        log_file: Log file path (CLI flag).
        unified: Parsed YAML configuration, used as fallback.

    Returns:
        Validated Settings instance.

    Raises:
        ValueError: If an env var or resolved value is invalid.
    """
    fb = unified or UnifiedConfig()

    # --- Numeric fields: CLI > env > YAML ---

    if max_revisions is not None:
        final_max_revisions = max_revisions
    else:
        raw = os.getenv("DOC_RECONCILE_MAX_REVISIONS")
        if raw is not None:
            try:
                final_max_revisions = int(raw)
            except ValueError:
                raise ValueError(
                    f"Invalid DOC_RECONCILE_MAX_REVISIONS '{raw}': must be a number between 1 and 1000"
                ) from None
        else:
            final_max_revisions = fb.revisions.max_revisions

    # --- String fields: CLI > env > YAML ---

    final_current = (
        current_label
        or os.getenv("DOC_RECONCILE_CURRENT_LABEL")
        or fb.merge.current_label
    )
    final_incoming = (
        incoming_label
        or os.getenv("DOC_RECONCILE_INCOMING_LABEL")
        or fb.merge.incoming_label
    )

    # --- Boolean fields: CLI > env > default ---

    if debug:
        final_debug = True
    else:
        final_debug = bool(_get_bool_env("DOC_RECONCILE_DEBUG"))

    settings = Settings(
        max_revisions=final_max_revisions,
        current_label=final_current,
        incoming_label=final_incoming,
        debug=final_debug,
        log_level=fb.logging.level,
        log_file=log_file or fb.logging.file,
    )

    validate_settings(settings)

    return settings
