"""Generator configuration."""

from __future__ import annotations

import argparse
from dataclasses import dataclass, field

from oas_generator.constants import (
    DEFAULT_MAX_LINE_WIDTH,
    DEFAULT_TS_TARGET,
    NamingConvention,
    TypeScriptModule,
)


@dataclass
class FileConfig:
    """Controls file naming and layout width."""

    naming_convention: NamingConvention = NamingConvention.KEBAB
    max_line_width: int = DEFAULT_MAX_LINE_WIDTH

    def __post_init__(self) -> None:
        if self.max_line_width <= 0:
            msg = f"max_line_width must be positive, got {self.max_line_width}"
            raise ValueError(msg)


@dataclass
class PackageConfig:
    """Controls emission of package.json, tsconfig files and README."""

    generate_package: bool = False
    package_name: str | None = None
    scope: str | None = None
    typescript_target: str = DEFAULT_TS_TARGET
    typescript_module: TypeScriptModule = TypeScriptModule.COMMONJS
    generate_esm_config: bool = False
    include_build_scripts: bool = True

    def full_package_name(self, fallback: str) -> str:
        """Return the npm package name, prefixed with the scope when one is set.

        Args:
            fallback: Name used when no explicit package name is configured.

        Returns:
            The package name, e.g. ``@acme/petstore``.
        """
        name = self.package_name or fallback
        if self.scope:
            scope = self.scope.lstrip("@")
            return f"@{scope}/{name}"
        return name


@dataclass
class GeneratorConfig:
    file_config: FileConfig = field(default_factory=FileConfig)
    package_config: PackageConfig = field(default_factory=PackageConfig)

    @classmethod
    def from_cli(cls, args: argparse.Namespace) -> GeneratorConfig:
        """Build a configuration from parsed ``generate`` arguments."""
        return cls(
            file_config=FileConfig(
                naming_convention=NamingConvention(args.naming),
                max_line_width=args.max_line_width,
            ),
            package_config=PackageConfig(
                generate_package=args.package,
                package_name=args.package_name,
                scope=args.scope,
                generate_esm_config=args.esm,
            ),
        )
