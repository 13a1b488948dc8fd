"""
Script Entry Point Unit Tests
=============================

[CLI] The scripts under scripts/ with chain access mocked.
"""

import importlib.util
from pathlib import Path
from unittest.mock import MagicMock

import pytest

from config import Settings

SCRIPTS_DIR = Path(__file__).parent.parent.parent / "scripts"


def load_script(name):
    spec = importlib.util.spec_from_file_location(f"script_{name}", SCRIPTS_DIR / f"{name}.py")
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


@pytest.fixture
def settings(temp_dir):
    return Settings.from_env({
        "SEMAPHORE_ADDRESS": "0x" + "33" * 20,
        "GROUP_ID": "0",
        "USER_ID_SEED": "seed",
        "DEPLOYMENTS_DIR": str(temp_dir / "deployments"),
    })


def wire(monkeypatch, module, settings, chain=None):
    chain = chain or MagicMock(sender="0xdeployer")
    monkeypatch.setattr(module, "load_settings", lambda env_file=None: settings)
    monkeypatch.setattr(module, "setup_logging", lambda: None)
    monkeypatch.setattr(module, "connect_chain", lambda s: (chain, 31337))
    return chain


# ============================================================================
# hash_object.py
# ============================================================================

class TestHashObject:
    """Test the offline hashing script."""

    def test_prints_hash(self, capsys):
        from core.canonical import object_hash, object_hash_field

        module = load_script("hash_object")

        assert module.main(["--object", '{"b": 2, "a": 1}']) == 0

        out = capsys.readouterr().out
        assert 'JSON: {"a":1,"b":2}' in out
        assert f"Hash: {object_hash({'a': 1, 'b': 2})}" in out
        assert f"Field: {object_hash_field({'a': 1, 'b': 2})}" in out

    def test_invalid(self, capsys):
        module = load_script("hash_object")

        assert module.main(["--object", "[1,"]) == 1
        assert "[ERROR]" in capsys.readouterr().err


# ============================================================================
# deploy_semaphore.py
# ============================================================================

class TestDeploySemaphore:
    """Test Semaphore deployment output."""

    def test_deploy(self, monkeypatch, settings, temp_dir, capsys):
        import json
        from registry.semaphore import GroupInfo, SemaphoreDeployment

        module = load_script("deploy_semaphore")
        wire(monkeypatch, module, settings)
        manager = MagicMock()
        manager.deploy_stack.return_value = SemaphoreDeployment("0xp", "0xv", "0xs", 0, "0xdeployer")
        manager.group_info.return_value = GroupInfo(0, 0, 20, 0, admin="0xdeployer")
        monkeypatch.setattr(module, "SemaphoreManager", lambda chain, store=None, compiler=None: manager)

        env_path = temp_dir / ".env"
        assert module.main(["--depth", "16", "--write-env", "--env-file", str(env_path)]) == 0

        manager.deploy_stack.assert_called_once_with(16)
        out = capsys.readouterr().out
        assert "SEMAPHORE_ADDRESS=0xs" in out
        assert "GROUP_ID=0" in out
        assert "Group created successfully! Group ID: 0" in out
        assert "SEMAPHORE_ADDRESS=0xs\nGROUP_ID=0\n" == env_path.read_text()
        record = json.loads((temp_dir / "deployments" / "localhost.json").read_text())
        assert record["contracts"]["Semaphore"] == "0xs"
        assert record["groupId"] == 0

    def test_group_info_failure_not_fatal(self, monkeypatch, settings, capsys):
        from registry.semaphore import SemaphoreDeployment

        module = load_script("deploy_semaphore")
        wire(monkeypatch, module, settings)
        manager = MagicMock()
        manager.deploy_stack.return_value = SemaphoreDeployment("0xp", "0xv", "0xs", 3, "0xdeployer")
        manager.group_info.side_effect = RuntimeError("call reverted")
        monkeypatch.setattr(module, "SemaphoreManager", lambda chain, store=None, compiler=None: manager)

        assert module.main([]) == 0
        assert "Could not fetch group info" in capsys.readouterr().out


# ============================================================================
# deploy_registry.py
# ============================================================================

class TestDeployRegistry:
    """Test registry deployment output."""

    def test_deploy(self, monkeypatch, settings, temp_dir, capsys):
        module = load_script("deploy_registry")
        wire(monkeypatch, module, settings)
        registry = MagicMock()
        registry.deploy.return_value = "0xreg"
        registry_cls = MagicMock(return_value=registry, CONTRACT_NAME="AnonOwnershipRegistry")
        monkeypatch.setattr(module, "OwnershipRegistry", registry_cls)

        env_path = temp_dir / ".env"
        env_path.write_text("GROUP_ID=0\n")
        assert module.main(["--write-env", "--env-file", str(env_path)]) == 0

        assert registry.deploy.call_args[0][:2] == ("0x" + "33" * 20, 0)
        assert "REGISTRY_ADDRESS=0xreg" in capsys.readouterr().out
        assert "OWNERSHIP_REGISTRY_ADDRESS=0xreg" in env_path.read_text()

    def test_requires_semaphore(self, monkeypatch, settings):
        from core.exceptions import ConfigError

        module = load_script("deploy_registry")
        settings.semaphore_address = ""
        wire(monkeypatch, module, settings)

        with pytest.raises(ConfigError, match="SEMAPHORE_ADDRESS"):
            module.main([])


# ============================================================================
# add_member.py
# ============================================================================

class TestAddMember:
    """Test member registration."""

    def test_add_member(self, monkeypatch, settings, fake_sdk, capsys):
        module = load_script("add_member")
        wire(monkeypatch, module, settings)
        manager = MagicMock()
        monkeypatch.setattr(module, "build_sdk", lambda s: fake_sdk)
        monkeypatch.setattr(module, "SemaphoreManager", lambda chain, address=None: manager)

        assert module.main([]) == 0

        manager.add_member.assert_called_once_with(0, 1004)
        assert "Added member. Commitment: 1004" in capsys.readouterr().out


# ============================================================================
# test_new_object.py
# ============================================================================

class TestNewObject:
    """Test the fresh-document generator."""

    def test_new_document_shape(self):
        module = load_script("test_new_object")

        document = module.new_document()

        assert document["title"] == "My New Document"
        assert document["version"] == 2
        assert document["metadata"]["author"] == "anonymous"
        assert isinstance(document["metadata"]["timestamp"], int)
