"""
PageMeta — Configuration
========================

What:  Registration options for the pagination middleware and process-level
       settings for the host application factory.
Why:   Options are validated once, at registration, so the per-request code
       path can trust them without re-checking.
How:   `PaginationOptions` is a frozen Pydantic model accepting both the
       registration option keys (`limit`, `name`, `excludeFormats`, ...) and the
       Python attribute names. `Settings` reads defaults from the environment
       via pydantic-settings.
Who:   `register_pagination()` builds `PaginationOptions`; `main.create_app()`
       reads `Settings`.

Option keys:
    limit           → default_limit    (int >= 1, default 100)
    name            → meta_key         (str, default "meta")
    results         → results_key      (str, default "results")
    routes          → routes           (list of paths, default ["*"])
    excludeFormats  → exclude_formats  (set of `format` values, default empty)
    onInvalid       → on_invalid       ("reject" | "default", default "reject")
"""

from typing import Any, Dict, FrozenSet, List, Literal, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic_settings import BaseSettings

# Route value meaning "every route"
ALL_ROUTES = "*"

# Metadata fields owned by this package (added on approve, removed on reject)
META_FIELDS: Tuple[str, ...] = ("page", "limit", "found")


class PaginationOptions(BaseModel):
    """
    Immutable configuration of one middleware registration.

    Attributes:
        default_limit:   Page size used when the query omits `limit`.
        meta_key:        Key the metadata object is attached under.
        results_key:     Key the original body is nested under when wrapping.
        routes:          Route templates eligible for enrichment; "*" = all.
                         An empty list approves nothing.
        exclude_formats: `format` query values that suppress enrichment.
        on_invalid:      What to do with a malformed `page`/`limit`:
                         "reject" answers 400, "default" falls back silently.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="forbid")

    default_limit: int = Field(default=100, ge=1, alias="limit")
    meta_key: str = Field(default="meta", min_length=1, alias="name")
    results_key: str = Field(default="results", min_length=1, alias="results")
    routes: Tuple[str, ...] = Field(default=(ALL_ROUTES,))
    exclude_formats: FrozenSet[str] = Field(default=frozenset(), alias="excludeFormats")
    on_invalid: Literal["reject", "default"] = Field(default="reject", alias="onInvalid")

    @field_validator("routes", mode="before")
    @classmethod
    def coerce_routes(cls, v: Any) -> Any:
        # A bare string would otherwise be split into characters
        if isinstance(v, str):
            return (v,)
        return v

    @field_validator("exclude_formats", mode="before")
    @classmethod
    def coerce_formats(cls, v: Any) -> Any:
        if isinstance(v, str):
            return frozenset({v})
        return v

    @model_validator(mode="after")
    def check_distinct_keys(self) -> "PaginationOptions":
        if self.meta_key == self.results_key:
            raise ValueError(
                f"'name' and 'results' must differ (both are '{self.meta_key}')"
            )
        return self

    @property
    def all_routes(self) -> bool:
        """
        True when the wildcard route is configured.

        Only a leading "*" is the wildcard: ["/a", "*"] approves "/a" alone,
        and an empty tuple approves nothing.
        """
        return self.routes[:1] == (ALL_ROUTES,)


class Settings(BaseSettings):
    """
    Process settings for the host application factory (`main.create_app`).

    Every field can be set through a `PAGEMETA_`-prefixed environment
    variable or a `.env` file, e.g. `PAGEMETA_DEFAULT_LIMIT=50`.
    List-valued options are comma-separated strings.
    """

    # ── Logging ───────────────────────────────────────────────────────────
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Ensures log level is a valid Python logging level name."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper = v.upper()
        if upper not in valid_levels:
            raise ValueError(f"Invalid log_level '{v}'. Must be one of: {valid_levels}")
        return upper

    # ── Pagination defaults ───────────────────────────────────────────────
    # What: Page size when the query omits `limit`
    # Valid range: >= 1 (PaginationOptions re-checks at registration)
    default_limit: int = Field(default=100, ge=1)

    # What: Keys of the envelope; must differ from each other
    meta_key: str = Field(default="meta")
    results_key: str = Field(default="results")

    # What: Comma-separated route templates, e.g. "/items,/items/{item_id}"
    # "*" as the first entry means all routes; "" means no routes at all
    routes: str = Field(default=ALL_ROUTES)

    # What: Comma-separated `format` values that suppress enrichment, e.g. "csv,xml"
    exclude_formats: str = Field(default="")

    # What: Policy for malformed page/limit
    # "reject" → 400 before the handler runs; "default" → fall back and log a warning
    on_invalid: Literal["reject", "default"] = Field(default="reject")

    model_config = {
        "env_prefix": "PAGEMETA_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
    }

    @property
    def routes_list(self) -> List[str]:
        """Comma-separated routes as a list; an empty string means no routes."""
        return [route.strip() for route in self.routes.split(",") if route.strip()]

    @property
    def exclude_formats_list(self) -> List[str]:
        return [fmt.strip() for fmt in self.exclude_formats.split(",") if fmt.strip()]

    def pagination_options(self) -> Dict[str, Any]:
        """Settings as registration option keys (Python attribute names)."""
        return {
            "default_limit": self.default_limit,
            "meta_key": self.meta_key,
            "results_key": self.results_key,
            "routes": self.routes_list,
            "exclude_formats": self.exclude_formats_list,
            "on_invalid": self.on_invalid,
        }


settings = Settings()
