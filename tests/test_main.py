"""Unit tests for the entrypoint commands."""

import unittest
from unittest.mock import MagicMock, patch
from minio_node import main
from minio_node.local.credentials import RotationOutcome
from minio_node.local.provisioning import BucketSpec
from config_fixtures import make_candidate, make_config, make_distributed_config


class TestMain(unittest.TestCase):
    """Test command dispatch and exit codes."""

    def setUp(self) -> None:
        patcher = patch("minio_node.main.setproctitle.setproctitle")
        patcher.start()
        self.addCleanup(patcher.stop)
        patcher = patch("minio_node.main.setup_logging")
        patcher.start()
        self.addCleanup(patcher.stop)

    def test_no_command(self) -> None:
        self.assertEqual(main.main([]), main.EXIT_FAILURE)

    def test_help(self) -> None:
        self.assertEqual(main.main(["help"]), main.EXIT_OK)

    def test_unknown_command(self) -> None:
        self.assertEqual(main.main(["bogus"]), main.EXIT_FAILURE)

    @patch("minio_node.main.settings.collect_environment")
    @patch("minio_node.local.validation.am_i_root", return_value=False)
    def test_validate(self, _root, collect) -> None:
        collect.return_value = make_candidate()
        self.assertEqual(main.main(["validate"]), main.EXIT_OK)

    @patch("minio_node.main.settings.collect_environment")
    @patch("minio_node.local.validation.am_i_root", return_value=False)
    def test_validate_failure(self, _root, collect) -> None:
        collect.return_value = make_candidate(MINIO_DISTRIBUTED_MODE_ENABLED="yes", MINIO_DISTRIBUTED_NODES="a,b,c")
        self.assertEqual(main.main(["validate"]), main.EXIT_FAILURE)

    @patch("minio_node.main.resolve_self_node")
    @patch("minio_node.main.load_config")
    def test_topology_error_exits(self, load_config, resolve) -> None:
        from minio_node.local.exceptions import TopologyError
        load_config.return_value = make_distributed_config()
        resolve.side_effect = TopologyError("not found")
        self.assertEqual(main.main(["node-name"]), main.EXIT_FAILURE)


class TestClientHost(unittest.TestCase):
    """Test selection of the admin client host."""

    def test_standalone(self) -> None:
        self.assertEqual(main.client_host(make_config()), "localhost")

    def test_range(self) -> None:
        self.assertEqual(main.client_host(make_distributed_config("minio{1...4}")), "localhost")

    @patch("minio_node.main.resolve_self_node")
    def test_explicit(self, resolve) -> None:
        resolve.return_value.host = "minio2"
        self.assertEqual(main.client_host(make_distributed_config()), "minio2")


class TestHealth(unittest.TestCase):
    """Test the health command."""

    @patch("minio_node.main.probe_liveness", return_value=True)
    def test_standalone_checks_localhost(self, liveness) -> None:
        config = make_config()
        self.assertEqual(main.cmd_health(config), main.EXIT_OK)
        liveness.assert_called_once_with(config, host="localhost")

    @patch("minio_node.main.resolve_self_node")
    @patch("minio_node.main.probe_liveness", return_value=False)
    def test_https_distributed_checks_own_host(self, liveness, resolve) -> None:
        resolve.return_value.host = "minio2"
        config = make_distributed_config(MINIO_SCHEME="https")
        self.assertEqual(main.cmd_health(config), main.EXIT_FAILURE)
        liveness.assert_called_once_with(config, host="minio2")


@patch("minio_node.main.BucketProvisioner")
@patch("minio_node.main.CredentialRotator")
@patch("minio_node.main.build_manager")
class TestSetup(unittest.TestCase):
    """Test the container setup flow."""

    def setUp(self) -> None:
        patcher = patch("minio_node.main.prepare_drives")
        self.prepare_drives = patcher.start()
        self.addCleanup(patcher.stop)

    def test_rotation_requests_restart(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.ROTATED
        manager = build_manager.return_value

        self.assertEqual(main.cmd_setup(make_config()), main.EXIT_RESTART_REQUIRED)
        manager.stop.assert_called_once_with()
        manager.client.configure_alias.assert_not_called()
        provisioner.assert_not_called()

    def test_provisions_buckets(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.UNCHANGED
        manager = build_manager.return_value
        config = make_config(MINIO_DEFAULT_BUCKETS="logs,data:download", MINIO_REGION_NAME="eu")

        self.assertEqual(main.cmd_setup(config), main.EXIT_OK)
        manager.client.configure_alias.assert_called_once_with()
        manager.start.assert_called_once_with()
        provisioner.assert_called_once_with(manager.client, region="eu")
        provisioner.return_value.provision.assert_called_once_with(
            (BucketSpec("logs"), BucketSpec("data", "download"))
        )
        manager.stop.assert_called_once_with()

    def test_stops_when_provisioning_fails(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.UNCHANGED
        provisioner.return_value.provision.side_effect = RuntimeError("boom")
        manager = build_manager.return_value

        with self.assertRaises(RuntimeError):
            main.cmd_setup(make_config(MINIO_DEFAULT_BUCKETS="logs"))
        manager.stop.assert_called_once_with()

    def test_skip_client_and_no_buckets(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.UNCHANGED
        manager = build_manager.return_value

        self.assertEqual(main.cmd_setup(make_config(MINIO_SKIP_CLIENT="yes")), main.EXIT_OK)
        manager.client.configure_alias.assert_not_called()
        manager.start.assert_not_called()

    def test_prepares_drives(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.UNCHANGED
        config = make_config()
        self.assertEqual(main.cmd_setup(config), main.EXIT_OK)
        self.prepare_drives.assert_called_once_with(config)

    def test_warns_when_server_outlives_stop(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.UNCHANGED
        manager = build_manager.return_value
        manager.handle.pid = 4242
        manager.handle.is_alive.return_value = True

        with self.assertLogs("minio_node.main", level="WARNING") as logs:
            main.cmd_setup(make_config(MINIO_DEFAULT_BUCKETS="logs"))
        self.assertIn("4242", logs.output[0])

    def test_stopped_server_not_reported(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.UNCHANGED
        manager = build_manager.return_value
        manager.handle = None

        with patch.object(main.log, "warning") as warning:
            main.cmd_setup(make_config(MINIO_DEFAULT_BUCKETS="logs"))
        warning.assert_not_called()

    def test_entrypoint_stops_before_run(self, build_manager, rotator, provisioner) -> None:
        rotator.return_value.rotate.return_value = RotationOutcome.ROTATED
        self.assertEqual(main.cmd_entrypoint(make_config()), main.EXIT_RESTART_REQUIRED)
        build_manager.return_value.run_foreground.assert_not_called()


if __name__ == "__main__":
    unittest.main()
