"""
Environment File Unit Tests
===========================

[CONFIG] Deployment scripts rewrite .env in place.
"""


class TestUpdateEnvVariables:
    """Test .env write-back."""

    def test_rewrites_existing_key(self, env_file):
        """Existing keys change; comments and other keys survive."""
        from core.utils.env import update_env_variables

        appended = update_env_variables({"RPC_URL": "http://node:8545"}, str(env_file))

        text = env_file.read_text()
        assert appended == []
        assert "RPC_URL=http://node:8545\n" in text
        assert "# local hardhat node\n" in text
        assert "USER_ID_SEED=secret\n" in text
        assert "127.0.0.1" not in text

    def test_keeps_export_prefix(self, env_file):
        from core.utils.env import update_env_variables

        update_env_variables({"SEMAPHORE_ADDRESS": "0xnew"}, str(env_file))

        assert "export SEMAPHORE_ADDRESS=0xnew\n" in env_file.read_text()

    def test_appends_missing_keys(self, env_file):
        """Missing keys go at the end after a blank line."""
        from core.utils.env import update_env_variables

        appended = update_env_variables({"GROUP_ID": 0, "RPC_URL": "x"}, str(env_file))

        lines = env_file.read_text().splitlines()
        assert appended == ["GROUP_ID"]
        assert lines[-1] == "GROUP_ID=0"
        assert lines[-2] == ""

    def test_creates_file(self, temp_dir):
        from core.utils.env import update_env_variables

        path = temp_dir / ".env"
        update_env_variables({"OWNERSHIP_REGISTRY_ADDRESS": "0xabc"}, str(path))

        assert path.read_text() == "OWNERSHIP_REGISTRY_ADDRESS=0xabc\n"

    def test_single_variable(self, env_file):
        from core.utils.env import update_env_variable

        update_env_variable("USER_ID_SEED", "other", str(env_file))

        assert "USER_ID_SEED=other\n" in env_file.read_text()
