"""
Tests for StateMachine
"""

import json
from unittest.mock import Mock, patch

import pytest

from state_graph_compiler.errors import UnterminatedState
from state_graph_compiler.policy import PolicyStatement, lambda_function_resource
from state_graph_compiler.scope import Scope
from state_graph_compiler.state_machine import DEFINITION_FILE_NAME, ROLE_POLICY_FILE_NAME, StateMachine
from state_graph_compiler.states import Task

ROLE_ARN = "arn:aws:iam::123456789012:role/OrdersRole"
FUNCTION_ARN = "arn:aws:lambda:us-west-2:123456789012:function:work"


@pytest.fixture
def definition():
    """Create a two-step definition calling the same function twice."""
    scope = Scope("Orders")
    first = Task(scope, "First", lambda_function_resource(FUNCTION_ARN))
    second = Task(scope, "Second", lambda_function_resource(FUNCTION_ARN))
    return first.next(second).end()


@pytest.fixture
def state_machine(definition):
    return StateMachine(definition, ROLE_ARN, state_machine_name="Orders", timeout_seconds=600)


class TestStateMachine:
    """Test compilation and the values handed to the infrastructure layer."""

    def test_definition_string(self, state_machine):
        assert json.loads(state_machine.definition_string) == state_machine.graph.to_graph_json()
        assert state_machine.definition_string == state_machine.definition_string
        assert state_machine.definition["TimeoutSeconds"] == 600

    def test_graph_label(self, state_machine, definition):
        assert state_machine.graph.graph_label == "State Machine Orders definition"
        assert StateMachine(definition, ROLE_ARN).graph.graph_label == "State Machine StateMachine definition"

    def test_policy_statements_are_deduplicated(self, state_machine):
        assert state_machine.policy_statements == [PolicyStatement(["lambda:InvokeFunction"], [FUNCTION_ARN])]

    def test_add_to_role_policy(self, state_machine):
        extra = PolicyStatement(["logs:CreateLogDelivery"], ["*"])

        state_machine.add_to_role_policy(extra)
        state_machine.add_to_role_policy(extra)

        assert state_machine.policy_statements[-1] == extra
        assert len(state_machine.policy_statements) == 2

    def test_policy_document(self, state_machine):
        assert state_machine.policy_document() == {
            "Version": "2012-10-17",
            "Statement": [{"Effect": "Allow", "Action": ["lambda:InvokeFunction"], "Resource": [FUNCTION_ARN]}],
        }

    def test_resource_properties(self, state_machine, definition):
        properties = state_machine.resource_properties()

        assert properties["RoleArn"] == ROLE_ARN
        assert properties["StateMachineName"] == "Orders"
        assert json.loads(properties["DefinitionString"])["StartAt"] == "First"
        assert "StateMachineName" not in StateMachine(definition, ROLE_ARN).resource_properties()

    def test_empty_role_arn(self, definition):
        with pytest.raises(ValueError):
            StateMachine(definition, "")

    def test_compile_errors_propagate(self):
        scope = Scope("Broken")
        open_task = Task(scope, "Open", lambda_function_resource(FUNCTION_ARN))

        with pytest.raises(UnterminatedState):
            StateMachine(open_task, ROLE_ARN)


class TestValidateDefinition:
    """Test validation through the Step Functions API."""

    @patch("builtins.print")
    @patch("boto3.client")
    def test_valid(self, mock_client, mock_print, state_machine):
        mock_sfn = Mock()
        mock_sfn.validate_state_machine_definition.return_value = {
            "result": "OK",
            "diagnostics": [{"severity": "WARNING", "code": "W1", "message": "note", "location": "/States"}],
        }
        mock_client.return_value = mock_sfn

        assert state_machine.validate_definition() is True
        mock_client.assert_called_once_with("stepfunctions")
        mock_sfn.validate_state_machine_definition.assert_called_once_with(
            definition=state_machine.definition_string
        )
        assert mock_print.call_count == 2

    @patch("builtins.print")
    @patch("boto3.client")
    def test_invalid(self, mock_client, mock_print, state_machine):
        mock_sfn = Mock()
        mock_sfn.validate_state_machine_definition.return_value = {
            "result": "FAIL",
            "diagnostics": [{"severity": "ERROR", "code": "E1", "message": "bad", "location": "/States/First"}],
        }
        mock_client.return_value = mock_sfn

        assert state_machine.validate_definition() is False
        printed = " ".join(str(call.args[0]) for call in mock_print.call_args_list)
        assert "FAIL" in printed
        assert "E1" in printed

    @patch("builtins.print")
    @patch("boto3.client")
    def test_api_error(self, mock_client, mock_print, state_machine):
        mock_client.return_value.validate_state_machine_definition.side_effect = Exception("no credentials")

        assert state_machine.validate_definition() is False
        assert "no credentials" in mock_print.call_args.args[0]


class TestSaveStateMachine:
    """Test writing the definition and role policy to disk."""

    @patch("builtins.print")
    def test_save_without_validation(self, mock_print, state_machine, tmp_path):
        assert state_machine.save_state_machine(tmp_path, validate=False) is True

        with open(tmp_path / DEFINITION_FILE_NAME) as f:
            assert json.load(f) == state_machine.definition
        with open(tmp_path / ROLE_POLICY_FILE_NAME) as f:
            assert json.load(f) == state_machine.policy_document()
        assert mock_print.call_count == 2

    @patch("builtins.print")
    def test_failed_validation_writes_nothing(self, mock_print, state_machine, tmp_path):
        with patch.object(state_machine, "validate_definition", return_value=False):
            assert state_machine.save_state_machine(tmp_path) is False

        assert not (tmp_path / DEFINITION_FILE_NAME).exists()
        assert not (tmp_path / ROLE_POLICY_FILE_NAME).exists()

    @patch("builtins.print")
    @patch("boto3.client")
    def test_save_with_validation(self, mock_client, mock_print, state_machine, tmp_path):
        mock_client.return_value.validate_state_machine_definition.return_value = {"result": "OK"}

        assert state_machine.save_state_machine(tmp_path) is True
        assert (tmp_path / DEFINITION_FILE_NAME).exists()
