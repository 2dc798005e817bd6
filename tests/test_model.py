import pytest
from pydantic import ValidationError

from mcdev.maven import SimpleMavenRepository
from mcdev.model import ArtifactCoordinate
from mcdev.model.manifest import (
    DownloadFileData,
    DownloadFileInstruction,
    ModifyJsonFileInstruction,
    PackageManifest,
)
from mcdev.model.project import ProjectDescription, StaticFileDescription, JsonInjectionDescription


def test_path_is_deterministic():
    coordinate = ArtifactCoordinate("g.h", "a", "1.0")
    assert coordinate.path() == "g/h/a/1.0/a-1.0.jar"
    assert coordinate.with_classifier("sources").path() == "g/h/a/1.0/a-1.0-sources.jar"


def test_local_repository_path(tmp_path):
    repository = SimpleMavenRepository(str(tmp_path))
    path = repository.path_for(ArtifactCoordinate("g.h", "a", "1.0"))
    assert path == str(tmp_path / "g" / "h" / "a" / "1.0" / "a-1.0.jar")


@pytest.mark.parametrize("text", [
    "net.minecraft:client:1.16.5",
    "net.md-5:SpecialSource:1.11.0:shaded",
    "net.minecraft:client:1.16.5:mappings@txt",
])
def test_string_form(text):
    assert str(ArtifactCoordinate.from_string(text)) == text


def test_mappings_coordinate():
    coordinate = ArtifactCoordinate.from_string("net.minecraft:client:1.16.5:mappings@txt")
    assert coordinate.classifier == "mappings"
    assert coordinate.extension == "txt"
    assert coordinate.filename() == "client-1.16.5-mappings.txt"


@pytest.mark.parametrize("text", ["a:b", "a::c", "a:b:c:d:e", "a:b:c@x@y"])
def test_invalid_coordinates(text):
    with pytest.raises(ValueError):
        ArtifactCoordinate.from_string(text)


def test_coordinates_are_immutable_values():
    a = ArtifactCoordinate("g", "a", "1")
    b = ArtifactCoordinate.from_string("g:a:1")
    assert a == b
    assert hash(a) == hash(b)
    assert a != a.with_classifier("sources")
    with pytest.raises(AttributeError):
        a.version = "2"


def test_project_description_aliases():
    project = ProjectDescription.model_validate({
        "group": "org.example",
        "name": "demo",
        "version": "1.0.0",
        "systemVersion": "2.0.0",
        "minecraftVersions": ["1.16.5"],
        "installJar": False,
        "dependencies": ["com.google.code.gson:gson:2.8.6"],
    })
    assert project.system_version == "2.0.0"
    assert project.install_jar is False
    assert project.dependencies == [ArtifactCoordinate("com.google.code.gson", "gson", "2.8.6")]
    assert project.resolve_channel() == "development"


def test_channel_from_environment(monkeypatch):
    monkeypatch.setenv("MCDEV_DISTRIBUTOR_CHANNEL", "release")
    project = ProjectDescription(group="g", name="n", version="1")
    assert project.resolve_channel() == "release"
    assert ProjectDescription(group="g", name="n", version="1", channel="beta").resolve_channel() == "beta"


def test_static_file_needs_exactly_one_source():
    with pytest.raises(ValidationError):
        StaticFileDescription.model_validate({"target": "x"})
    with pytest.raises(ValidationError):
        StaticFileDescription.model_validate({"target": "x", "sourceUrl": "https://a", "sourceFile": "b"})


def test_object_injection_needs_key():
    with pytest.raises(ValidationError):
        JsonInjectionDescription.model_validate({"file": "a.json", "type": "MODIFY_OBJECT", "injection": 1})


def test_instructions_are_discriminated_by_type():
    manifest = PackageManifest.model_validate({
        "group": "g", "name": "n", "description": "", "version": "1", "channel": "development",
        "minecraftVersions": "1.16.5", "systemVersion": "2.0.0",
        "installInstructions": [
            {"type": "DOWNLOAD_FILE", "os": "LINUX", "data": {"url": "u", "path": "p", "sha256": "00"}},
            {"type": "MODIFY_JSON_FILE", "os": "UNKNOWN", "data": {
                "path": "a.json", "prettyPrint": True,
                "injections": [{"type": "MODIFY_ARRAY", "overrideType": "KEEP", "path": ["x"], "injection": 1}],
            }},
        ],
    })
    download, modify = manifest.install_instructions
    assert isinstance(download, DownloadFileInstruction)
    assert download.data == DownloadFileData(url="u", path="p", sha256="00")
    assert isinstance(modify, ModifyJsonFileInstruction)
    assert modify.data.injections[0].override_type == "KEEP"
    assert '"prettyPrint": true' in manifest.json()
