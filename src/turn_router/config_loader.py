"""
Configuration loader with validation.

Builds TurnRouterConfig from environment variables (and a local .env file).
"""
from dotenv import load_dotenv

from .config import DEFAULT_KNOWLEDGE_BASE_ENDPOINT, TurnRouterConfig
from .config_validator import (
    get_optional_env,
    get_required_env,
    parse_float,
    parse_int,
    parse_metadata_pairs,
    validate_subscription_key,
)


def load_config_from_env(require_knowledge_base: bool = False) -> TurnRouterConfig:
    """
    Load configuration from environment variables with validation.

    Usage:
        config = load_config_from_env()
        app = TurnRouterApp(config)
        app.initialize()

    :param require_knowledge_base: Fail when knowledge base credentials are missing
    :return: Validated TurnRouterConfig instance
    :raises: ConfigurationError if required configs are missing or invalid
    """
    # Load .env file if it exists (for local development)
    load_dotenv()

    if require_knowledge_base:
        knowledge_base_id = get_required_env(
            "TURN_ROUTER_KB_ID", "Knowledge base identifier"
        )
        subscription_key = get_required_env(
            "TURN_ROUTER_SUBSCRIPTION_KEY", "Knowledge base subscription key"
        )
    else:
        knowledge_base_id = get_optional_env("TURN_ROUTER_KB_ID")
        subscription_key = get_optional_env("TURN_ROUTER_SUBSCRIPTION_KEY")

    if subscription_key:
        validate_subscription_key(subscription_key, "TURN_ROUTER_SUBSCRIPTION_KEY")

    return TurnRouterConfig(
        knowledge_base_id=knowledge_base_id,
        subscription_key=subscription_key,
        knowledge_base_endpoint=get_optional_env(
            "TURN_ROUTER_KB_ENDPOINT",
            default=DEFAULT_KNOWLEDGE_BASE_ENDPOINT
        ),
        max_answers=parse_int(
            get_optional_env("TURN_ROUTER_MAX_ANSWERS", "5"),
            "TURN_ROUTER_MAX_ANSWERS",
            minimum=1,
        ),
        metadata_boost=parse_metadata_pairs(
            get_optional_env("TURN_ROUTER_METADATA_BOOST"),
            "TURN_ROUTER_METADATA_BOOST",
        ),
        metadata_filter=parse_metadata_pairs(
            get_optional_env("TURN_ROUTER_METADATA_FILTER"),
            "TURN_ROUTER_METADATA_FILTER",
        ),
        timeout_seconds=parse_float(
            get_optional_env("TURN_ROUTER_TIMEOUT_SECONDS", "5.0"),
            "TURN_ROUTER_TIMEOUT_SECONDS",
            minimum=0.1,
        ),
        score_scale=parse_float(
            get_optional_env("TURN_ROUTER_SCORE_SCALE", "1.0"),
            "TURN_ROUTER_SCORE_SCALE",
            minimum=1.0,
        ),
        phrase_threshold=parse_float(
            get_optional_env("TURN_ROUTER_PHRASE_THRESHOLD", "0.5"),
            "TURN_ROUTER_PHRASE_THRESHOLD",
            minimum=0.0,
            maximum=1.0,
        ),
        initial_message=get_optional_env("TURN_ROUTER_INITIAL_MESSAGE"),
        no_match_message=get_optional_env("TURN_ROUTER_NO_MATCH_MESSAGE"),
    )
