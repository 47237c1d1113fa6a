"""Tests for coordinate and repository translation."""

import logging

from depmeta.models import ArtifactId, Dependency, IvyRepository, MavenRepository, ScopedDependency
from depmeta.resolution.ivy_pattern import IvyPattern
from depmeta.resolution.types import IvyRepo, MavenRepo, Module
from depmeta.translate import convert, convert_resolver, to_native_dependency

IVY_OK = IvyRepository("sbt-plugins", "https://repo.scala-sbt.org/scalasbt/sbt-plugin-releases/[defaultPattern]")
IVY_BROKEN = IvyRepository("broken", "https://repo.example.com/[organisation/[module]")


class TestCoordinateTranslation:
    """Dependency -> native dependency."""

    def test_uses_cross_name_and_disables_transitivity(self):
        dependency = Dependency("org.typelevel", ArtifactId("cats-core", "cats-core_2.13"), "2.1.0")
        native = to_native_dependency(dependency)
        assert native.module == Module("org.typelevel", "cats-core_2.13")
        assert native.version == "2.1.0"
        assert native.transitive is False

    def test_attributes_carried_over(self):
        dependency = Dependency(
            "org.scalameta", ArtifactId("sbt-scalafmt"), "2.0.0",
            {"sbtVersion": "1.0", "scalaVersion": "2.12"},
        )
        native = to_native_dependency(dependency)
        assert native.module.attribute_map == {"scalaVersion": "2.12", "sbtVersion": "1.0"}

    def test_dependency_is_immutable_value(self):
        attributes = {"sbtVersion": "1.0"}
        dependency = Dependency("g", ArtifactId("a"), "1", attributes)
        attributes["sbtVersion"] = "0.13"
        assert dependency.attribute_map == {"sbtVersion": "1.0"}
        copy = dependency.attribute_map
        copy["other"] = "x"
        assert dependency.attribute_map == {"sbtVersion": "1.0"}


class TestRepositoryTranslation:
    """Resolver -> native repository."""

    def test_maven_passes_location_through(self):
        repo = convert_resolver(MavenRepository("public", "https://repo1.maven.org/maven2/"))
        assert repo == MavenRepo("https://repo1.maven.org/maven2")

    def test_maven_malformed_location_is_not_a_translation_error(self):
        assert convert_resolver(MavenRepository("odd", "not a url")) == MavenRepo("not a url")

    def test_ivy_pattern_parsed(self):
        repo = convert_resolver(IVY_OK)
        assert isinstance(repo, IvyRepo)
        assert repo.pattern == IvyPattern.parse(IVY_OK.pattern)

    def test_malformed_ivy_pattern_logged_and_dropped(self, caplog):
        with caplog.at_level(logging.ERROR, logger="depmeta.translate"):
            assert convert_resolver(IVY_BROKEN) is None
        assert any("Failed to convert" in r.getMessage() and "broken" in r.getMessage()
                   for r in caplog.records)

    def test_convert_keeps_valid_repositories_in_order(self, caplog):
        maven = MavenRepository("public", "https://repo1.maven.org/maven2")
        scoped = ScopedDependency(Dependency("g", ArtifactId("a"), "1"), (IVY_BROKEN, maven, IVY_OK))
        with caplog.at_level(logging.ERROR):
            native, repositories = convert(scoped)
        assert native.module == Module("g", "a")
        assert repositories[0] == MavenRepo("https://repo1.maven.org/maven2")
        assert isinstance(repositories[1], IvyRepo)
        assert len(repositories) == 2
        assert scoped.resolvers == (IVY_BROKEN, maven, IVY_OK)
