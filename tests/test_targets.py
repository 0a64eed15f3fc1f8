"""
Tests for target records and the target resolver.

Uses Python's unittest module.
Tests alias and URL lookup, ambiguity handling, and current-target updates.
"""

from __future__ import annotations

import unittest

from saferc.config.targets import CONFIG_VERSION, Config, Vault
from saferc.exceptions import (
    AmbiguousTargetError,
    NoTargetSelectedError,
    TargetError,
    TargetNotFoundError,
)


def make_config() -> Config:
    """Build a config with two distinct targets and prod current."""
    return Config(
        current="prod",
        vaults={
            "prod": Vault(url="https://vault.example.com/", token="s.prod"),
            "dev": Vault(url="https://dev.example.com", token="s.dev", skip_verify=True),
        },
    )


class TestVault(unittest.TestCase):
    """Tests for the Vault record."""

    def test_defaults(self) -> None:
        """Test token and skip_verify default to empty/false."""
        vault = Vault(url="https://v.example")

        self.assertEqual(vault.token, "")
        self.assertFalse(vault.skip_verify)

    def test_to_dict(self) -> None:
        """Test on-disk key names."""
        vault = Vault(url="https://v.example", token="s.abc", skip_verify=True)

        self.assertEqual(
            vault.to_dict(),
            {"url": "https://v.example", "token": "s.abc", "skip_verify": True},
        )

    def test_from_dict_missing_fields(self) -> None:
        """Test missing token and skip_verify decode to defaults."""
        vault = Vault.from_dict({"url": "https://v.example"})

        self.assertEqual(vault, Vault(url="https://v.example"))

    def test_from_dict_keeps_scalar_text(self) -> None:
        """Test unquoted numeric and boolean values decode as text."""
        vault = Vault.from_dict({"url": "https://v.example", "token": 12345})

        self.assertEqual(vault.token, "12345")
        self.assertEqual(Vault.from_dict({"url": 8200.5, "token": True}).url, "8200.5")
        self.assertEqual(Vault.from_dict({"url": "u", "token": True}).token, "true")

    def test_from_dict_rejects_bad_types(self) -> None:
        """Test wrong field types raise ValueError."""
        with self.assertRaises(ValueError):
            Vault.from_dict({"url": ["https://v.example"]})
        with self.assertRaises(ValueError):
            Vault.from_dict({"url": "https://v.example", "skip_verify": "yes"})
        with self.assertRaises(ValueError):
            Vault.from_dict(["https://v.example"])  # type: ignore[arg-type]


class TestConfigDocument(unittest.TestCase):
    """Tests for Config serialization."""

    def test_default_config(self) -> None:
        """Test a fresh config is version 1 with nothing selected."""
        config = Config()

        self.assertEqual(config.version, CONFIG_VERSION)
        self.assertEqual(config.current, "")
        self.assertEqual(config.vaults, {})

    def test_to_dict_and_back(self) -> None:
        """Test conversion to the on-disk mapping and back."""
        config = make_config()

        data = config.to_dict()

        self.assertEqual(data["version"], 1)
        self.assertEqual(data["current"], "prod")
        self.assertEqual(data["vaults"]["dev"]["skip_verify"], True)
        self.assertEqual(Config.from_dict(data), config)

    def test_from_dict_missing_version_is_zero(self) -> None:
        """Test an unversioned mapping decodes with version 0."""
        config = Config.from_dict({"Current": "x"})

        self.assertEqual(config.version, 0)
        self.assertEqual(config.vaults, {})

    def test_from_dict_rejects_bad_shape(self) -> None:
        """Test wrong top-level types raise ValueError."""
        with self.assertRaises(ValueError):
            Config.from_dict({"version": "one"})
        with self.assertRaises(ValueError):
            Config.from_dict({"version": 1, "vaults": ["prod"]})
        with self.assertRaises(ValueError):
            Config.from_dict({"version": 1, "current": {"alias": "prod"}})

    def test_from_dict_numeric_current(self) -> None:
        """Test an unquoted numeric alias still selects its target."""
        config = Config.from_dict(
            {"version": 1, "current": 42, "vaults": {42: {"url": "https://v.example"}}}
        )

        self.assertEqual(config.current, "42")
        self.assertEqual(config.url(), "https://v.example")

    def test_aliases_sorted(self) -> None:
        """Test aliases are listed in sorted order."""
        self.assertEqual(make_config().aliases(), ["dev", "prod"])


class TestFind(unittest.TestCase):
    """Tests for Config.find."""

    def test_find_by_alias(self) -> None:
        """Test exact alias lookup."""
        config = make_config()

        self.assertIs(config.find("prod"), config.vaults["prod"])

    def test_find_by_url_ignores_trailing_slash(self) -> None:
        """Test URL lookup with the stored URL ending in a slash."""
        config = Config(vaults={"prod": Vault(url="https://v.example/")})

        self.assertIs(config.find("https://v.example"), config.vaults["prod"])
        self.assertIs(config.find("https://v.example/"), config.vaults["prod"])

    def test_find_by_url_input_trailing_slash(self) -> None:
        """Test URL lookup with the input ending in a slash."""
        config = make_config()

        self.assertIs(config.find("https://dev.example.com/"), config.vaults["dev"])

    def test_find_missing(self) -> None:
        """Test lookup of an unknown name returns None."""
        self.assertIsNone(make_config().find("staging"))

    def test_find_ambiguous_url(self) -> None:
        """Test two targets differing only by trailing slash are ambiguous."""
        config = Config(
            vaults={
                "a": Vault(url="https://v.example/"),
                "b": Vault(url="https://v.example"),
            }
        )

        with self.assertRaises(AmbiguousTargetError) as ctx:
            config.find("https://v.example")

        self.assertEqual(ctx.exception.target, "https://v.example")
        self.assertIn("maybe try an alias", str(ctx.exception))

    def test_alias_wins_over_url(self) -> None:
        """Test an alias key beats URL matches for the same string."""
        config = Config(
            vaults={
                "https://v.example": Vault(url="https://other.example"),
                "a": Vault(url="https://v.example"),
                "b": Vault(url="https://v.example/"),
            }
        )

        vault = config.find("https://v.example")

        self.assertEqual(vault.url, "https://other.example")

    def test_only_one_slash_stripped(self) -> None:
        """Test only a single trailing slash is ignored."""
        config = Config(vaults={"prod": Vault(url="https://v.example")})

        self.assertIsNone(config.find("https://v.example//"))


class TestResolve(unittest.TestCase):
    """Tests for Config.resolve."""

    def test_resolve_current(self) -> None:
        """Test empty name resolves the current target."""
        config = make_config()

        self.assertIs(config.resolve(""), config.vaults["prod"])

    def test_resolve_nothing_selected(self) -> None:
        """Test no current target is not an error."""
        config = make_config()
        config.current = ""

        self.assertIsNone(config.resolve(""))

    def test_resolve_named(self) -> None:
        """Test an explicit name overrides the current target."""
        config = make_config()

        self.assertIs(config.resolve("dev"), config.vaults["dev"])

    def test_resolve_unknown_raises(self) -> None:
        """Test an unknown explicit name raises."""
        with self.assertRaises(TargetNotFoundError) as ctx:
            make_config().resolve("staging")

        self.assertEqual(ctx.exception.target, "staging")

    def test_resolve_dangling_current_raises(self) -> None:
        """Test a current alias with no matching target raises."""
        config = make_config()
        config.current = "gone"

        with self.assertRaises(TargetNotFoundError):
            config.resolve("")


class TestSetCurrent(unittest.TestCase):
    """Tests for Config.set_current."""

    def test_set_current(self) -> None:
        """Test selecting an existing target."""
        config = make_config()

        config.set_current("dev")

        self.assertEqual(config.current, "dev")
        self.assertEqual(config.url(), "https://dev.example.com")

    def test_set_current_missing(self) -> None:
        """Test selecting an unknown target raises and changes nothing."""
        config = make_config()

        with self.assertRaises(TargetNotFoundError):
            config.set_current("missing")

        self.assertEqual(config.current, "prod")

    def test_set_current_forces_skip_verify(self) -> None:
        """Test skip_verify=True turns verification off for the target."""
        config = make_config()

        config.set_current("prod", skip_verify=True)

        self.assertTrue(config.vaults["prod"].skip_verify)

    def test_set_current_does_not_reenable_verify(self) -> None:
        """Test skip_verify=False leaves an existing setting alone."""
        config = make_config()

        config.set_current("dev", skip_verify=False)

        self.assertTrue(config.vaults["dev"].skip_verify)

    def test_set_current_ambiguous(self) -> None:
        """Test selecting by an ambiguous URL raises."""
        config = Config(
            current="a",
            vaults={
                "a": Vault(url="https://v.example/"),
                "b": Vault(url="https://v.example"),
            },
        )

        with self.assertRaises(AmbiguousTargetError):
            config.set_current("https://v.example")

        self.assertEqual(config.current, "a")


class TestSetTarget(unittest.TestCase):
    """Tests for Config.set_target."""

    def test_set_new_target(self) -> None:
        """Test defining a new target makes it current."""
        config = Config()

        config.set_target("stage", "https://stage/", True)

        self.assertEqual(config.current, "stage")
        self.assertEqual(config.url(), "https://stage/")
        self.assertFalse(config.verified())

    def test_set_target_overwrites(self) -> None:
        """Test redefining an alias drops its old token."""
        config = make_config()

        config.set_target("prod", "https://new.example.com", False)

        self.assertEqual(config.vaults["prod"].token, "")
        self.assertEqual(config.vaults["prod"].url, "https://new.example.com")

    def test_set_target_allows_duplicate_url(self) -> None:
        """Test two aliases may share a URL."""
        config = make_config()

        config.set_target("prod2", "https://vault.example.com", False)

        self.assertEqual(len(config.vaults), 3)
        with self.assertRaises(AmbiguousTargetError):
            config.find("https://vault.example.com")


class TestSetToken(unittest.TestCase):
    """Tests for Config.set_token."""

    def test_set_token(self) -> None:
        """Test the token is stored on the current target."""
        config = make_config()

        config.set_token("s.new")

        self.assertEqual(config.vaults["prod"].token, "s.new")
        self.assertEqual(config.vaults["dev"].token, "s.dev")

    def test_set_token_no_target(self) -> None:
        """Test setting a token with nothing selected raises."""
        config = Config()

        with self.assertRaises(NoTargetSelectedError):
            config.set_token("s.new")

    def test_set_token_dangling_current(self) -> None:
        """Test setting a token when the current alias is gone raises."""
        config = make_config()
        config.current = "gone"

        with self.assertRaises(TargetNotFoundError):
            config.set_token("s.new")

    def test_errors_share_base(self) -> None:
        """Test resolver errors are TargetErrors."""
        self.assertTrue(issubclass(NoTargetSelectedError, TargetError))
        self.assertTrue(issubclass(AmbiguousTargetError, TargetError))
        self.assertTrue(issubclass(TargetNotFoundError, TargetError))


class TestCurrentProjections(unittest.TestCase):
    """Tests for Config.url and Config.verified."""

    def test_verified_true(self) -> None:
        """Test a verifying target reports True."""
        self.assertTrue(make_config().verified())

    def test_no_current(self) -> None:
        """Test defaults when nothing is selected."""
        config = Config()

        self.assertEqual(config.url(), "")
        self.assertFalse(config.verified())

    def test_dangling_current(self) -> None:
        """Test defaults when the current alias is gone."""
        config = make_config()
        config.current = "gone"

        self.assertEqual(config.url(), "")
        self.assertFalse(config.verified())

    def test_ambiguous_current(self) -> None:
        """Test defaults when the current name is an ambiguous URL."""
        config = Config(
            current="https://v.example",
            vaults={
                "a": Vault(url="https://v.example/"),
                "b": Vault(url="https://v.example"),
            },
        )

        self.assertEqual(config.url(), "")
        self.assertFalse(config.verified())


if __name__ == "__main__":
    unittest.main()
