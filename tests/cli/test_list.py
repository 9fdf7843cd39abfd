from click.testing import CliRunner

from tfmodref.cli.main import cli
from tests.cli.asserts import assert_in_output
from tests.cli.cli_setup import TfmodrefCLISetup

import pytest


def names(tf_dir):
    main_tf = (tf_dir / "network" / "main.tf").resolve()
    terragrunt_hcl = (tf_dir / "live" / "terragrunt.hcl").resolve()
    return f"{main_tf} [vpc]", f"{main_tf} [dns]", str(terragrunt_hcl)


@pytest.mark.short
def test_list_local_versions(tf_dir, capture_logs):
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--path", str(tf_dir)])

    assert result.exit_code == 0
    vpc, dns, live = names(tf_dir)
    logs = capture_logs.getvalue()
    assert f"module: {vpc} (local: v3.0.0)" in logs
    assert f"module: {dns} (local: HEAD)" in logs
    assert f"module: {live} (local: v5.0.0)" in logs
    assert "registry" not in logs


@pytest.mark.short
def test_list_remote_versions(tf_dir, capture_logs, patched_resolver):
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--path", str(tf_dir), "--remote"])

    assert result.exit_code == 0
    vpc, dns, live = names(tf_dir)
    logs = capture_logs.getvalue()
    assert f"module: {vpc} (local: v3.0.0, remote: v5.0.0, total versions: 5)" in logs
    assert f"module: {dns} (local: HEAD, remote: v5.0.0, total versions: 5)" in logs
    assert f"module: {live} (local: v5.0.0, remote: v5.0.0, total versions: 5)" in logs
    # dns and live share a repository
    assert len(patched_resolver.calls) == 2


@pytest.mark.short
def test_list_remote_failure(tf_dir, capture_logs, patched_resolver):
    patched_resolver.tags["https://github.com/acme/terraform-vpc.git"] = ["latest"]

    runner = CliRunner()
    result = runner.invoke(cli, ["list", "-p", str(tf_dir), "-r"])

    assert result.exit_code == 1
    vpc, _, live = names(tf_dir)
    logs = capture_logs.getvalue()
    assert f"could not get remote tags for module {vpc}" in logs
    assert f"module: {live} (local: v5.0.0, remote: v5.0.0" in logs


@pytest.mark.short
def test_list_extension_filter(tf_dir, capture_logs):
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--path", str(tf_dir), "-e", "hcl"])

    assert result.exit_code == 0
    vpc, _, live = names(tf_dir)
    logs = capture_logs.getvalue()
    assert live in logs
    assert vpc not in logs


@pytest.mark.short
def test_list_invalid_file(tf_dir, capture_logs):
    (tf_dir / "broken.tf").write_text('module "x" {\n  source = \n')

    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--path", str(tf_dir)])

    assert result.exit_code == 1
    logs = capture_logs.getvalue()
    assert "errors occurred whilst parsing file at" in logs
    # the other files are still listed
    assert "(local: v3.0.0)" in logs


@pytest.mark.short
def test_list_missing_path(tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, ["list", "--path", str(tmp_path / "missing")])

    assert result.exit_code == 2


@pytest.mark.short
def test_list_prints_to_stdout(tf_dir):
    with TfmodrefCLISetup() as tfmodref:
        result = tfmodref.call(["list", "--path", "network"], cwd=str(tf_dir))

    assert result.returncode == 0
    main_tf = (tf_dir / "network" / "main.tf").resolve()
    assert_in_output(result.stdout, f"module: {main_tf} [vpc] (local: v3.0.0)")


@pytest.mark.short
def test_debug_output(tf_dir, capture_logs):
    runner = CliRunner()
    result = runner.invoke(cli, ["--debug", "list", "--path", str(tf_dir)])

    assert result.exit_code == 0
    logs = capture_logs.getvalue()
    assert "Found 2 file(s)" in logs
    assert "Ignoring" in logs  # the registry module


@pytest.mark.short
def test_version_option():
    runner = CliRunner()
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert "tfmodref" in result.output
