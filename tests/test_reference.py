import copy
import json
from pathlib import Path

import pytest

from usos_codegen.reference import (
    InvalidReferenceError,
    MethodReference,
    ModuleItem,
    ModuleItemKind,
    ModuleItems,
    SignatureRequirement,
)
from usos_core.errors import ParseError

from . import CONSUMER_REFERENCE, NOW_REFERENCE


class TestMethodReference:
    def test_from_dict(self) -> None:
        reference = MethodReference.from_dict(CONSUMER_REFERENCE)

        assert reference.name == "services/apisrv/consumer"
        assert reference.api_path == "apisrv/consumer"
        assert reference.auth_options.consumer is SignatureRequirement.REQUIRED
        assert reference.auth_options.token is SignatureRequirement.OPTIONAL
        assert reference.deprecated is None
        assert [field.name for field in reference.result_fields] == ["name", "url", "email"]

    def test_derived_names(self) -> None:
        reference = MethodReference.from_dict(CONSUMER_REFERENCE)

        assert reference.python_function_name == "consumer"
        assert reference.output_class_name == "ApisrvConsumerOutput"
        assert reference.module_parts == ["apisrv", "consumer"]

    def test_generated_arguments_skip_client_handled_and_deprecated(self) -> None:
        reference = MethodReference.from_dict(CONSUMER_REFERENCE)

        assert [arg.name for arg in reference.generated_arguments] == ["fields"]

    def test_keyword_names_are_escaped(self) -> None:
        data = copy.deepcopy(NOW_REFERENCE)
        data["name"] = "services/events/import"
        data["short_name"] = "import"
        data["arguments"] = [{"name": "from", "is_required": True, "description": ""}]

        reference = MethodReference.from_dict(data)

        assert reference.python_function_name == "import_"
        assert reference.module_parts == ["events", "import_"]
        assert reference.arguments[0].python_name == "from_"

    def test_deprecated(self) -> None:
        data = dict(NOW_REFERENCE, deprecated={"deprecated_by": "services/apisrv/now2", "present_until": "2030-01-01"})

        deprecated = MethodReference.from_dict(data).deprecated

        assert deprecated is not None
        assert deprecated.deprecated_by == "services/apisrv/now2"

    def test_missing_auth_options(self) -> None:
        data = {k: v for k, v in NOW_REFERENCE.items() if k != "auth_options"}

        with pytest.raises(InvalidReferenceError, match="auth_options"):
            MethodReference.from_dict(data)

    def test_invalid_requirement(self) -> None:
        data = copy.deepcopy(NOW_REFERENCE)
        data["auth_options"]["token"] = "sometimes"

        with pytest.raises(InvalidReferenceError, match="sometimes"):
            MethodReference.from_dict(data)

    def test_argument_without_name(self) -> None:
        data = dict(NOW_REFERENCE, arguments=[{"is_required": True}])

        with pytest.raises(InvalidReferenceError):
            MethodReference.from_dict(data)

    def test_not_an_object(self) -> None:
        with pytest.raises(ParseError):
            MethodReference.from_dict(["services/apisrv/now"])

    def test_from_file(self, tmp_path: Path) -> None:
        single = tmp_path / "now.json"
        single.write_text(json.dumps(NOW_REFERENCE), encoding="utf-8")
        many = tmp_path / "apisrv.json"
        many.write_text(json.dumps([NOW_REFERENCE, CONSUMER_REFERENCE]), encoding="utf-8")

        assert [r.name for r in MethodReference.from_file(single)] == ["services/apisrv/now"]
        assert len(MethodReference.from_file(many)) == 2


class TestModuleItems:
    def test_from_dict(self) -> None:
        listing = ModuleItems.from_dict(
            "services/apisrv",
            {"submodules": ["services/apisrv/sub"], "methods": ["services/apisrv/now", "services/apisrv/consumer"]},
        )

        assert list(listing) == [
            ModuleItem.module("services/apisrv/sub"),
            ModuleItem.endpoint("services/apisrv/now"),
            ModuleItem.endpoint("services/apisrv/consumer"),
        ]
        assert "services/apisrv/now" in listing
        assert listing.kind_of("services/apisrv/sub") is ModuleItemKind.MODULE
        assert listing.kind_of("services/other") is None

    def test_missing_key(self) -> None:
        with pytest.raises(InvalidReferenceError):
            ModuleItems.from_dict("services", {"submodules": []})

    def test_item_str(self) -> None:
        item = ModuleItem.endpoint("services/apisrv/now")

        assert str(item) == "Endpoint: services/apisrv/now"
        assert item.short_name == "now"
