"""
State Machine definition wrapper.

Ties a compiled state graph to the identity the surrounding infrastructure
layer provides (a name and an execution role ARN) and hands back what that
layer needs: the definition string and the permission statements to attach
to the role. It can also write both to disk, optionally validating the
definition with AWS Step Functions first.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import boto3
from colorama import Fore, Style

from .graph import StateGraph
from .policy import PolicyStatement, policy_document

logger = logging.getLogger(__name__)

DEFINITION_FILE_NAME = "state_machine.asl.json"
ROLE_POLICY_FILE_NAME = "role_policy.json"


class StateMachine:
    """
    A compiled state machine definition plus its execution role policy.

    Attributes:
        state_machine_name (Optional[str]): Name of the state machine, if chosen by the caller
        role_arn (str): ARN of the execution role the definition runs under
        graph (StateGraph): The compiled graph
        role_policy_statements (List[PolicyStatement]): Statements to attach to the role
    """

    def __init__(
        self,
        definition: Any,
        role_arn: str,
        state_machine_name: Optional[str] = None,
        timeout_seconds: Optional[int] = None,
    ):
        """
        Compile ``definition`` and collect the statements its states need.

        Args:
            definition: Start state or chain of the state machine
            role_arn: ARN of the execution role
            state_machine_name: Optional explicit name
            timeout_seconds: Maximum run time of an execution

        Raises:
            StateGraphError: If the definition does not compile
        """
        if not role_arn:
            raise ValueError("Execution role ARN must not be empty")
        self.state_machine_name = state_machine_name
        self.role_arn = role_arn
        label = f"State Machine {state_machine_name or 'StateMachine'} definition"
        self.graph = StateGraph(definition, label, timeout_seconds=timeout_seconds)
        self.definition = self.graph.to_graph_json()
        self.role_policy_statements: List[PolicyStatement] = []
        for statement in self.graph.policy_statements:
            self.add_to_role_policy(statement)
        logger.info(
            "Compiled %s: %d state(s), %d policy statement(s)",
            label,
            len(self.graph.all_states),
            len(self.role_policy_statements),
        )

    @property
    def definition_string(self) -> str:
        """The definition as JSON text, identical across calls for the same graph."""
        return json.dumps(self.definition)

    @property
    def policy_statements(self) -> List[PolicyStatement]:
        return list(self.role_policy_statements)

    def add_to_role_policy(self, statement: PolicyStatement) -> None:
        """Add a statement to the role policy unless an identical one is already there."""
        if statement not in self.role_policy_statements:
            self.role_policy_statements.append(statement)

    def policy_document(self) -> Dict[str, Any]:
        """IAM policy document holding every role policy statement."""
        return policy_document(self.role_policy_statements)

    def resource_properties(self) -> Dict[str, Any]:
        """Properties of an ``AWS::StepFunctions::StateMachine`` resource for this definition."""
        properties = {
            "RoleArn": self.role_arn,
            "DefinitionString": self.definition_string,
        }
        if self.state_machine_name:
            properties["StateMachineName"] = self.state_machine_name
        return properties

    def validate_definition(self) -> bool:
        """
        Validate the definition with the Step Functions ValidateStateMachineDefinition API.

        Returns:
            True if the service reports the definition as valid, False otherwise
        """
        sfn_client = boto3.client('stepfunctions')
        try:
            response = sfn_client.validate_state_machine_definition(definition=self.definition_string)
        except Exception as e:
            print(f"{Fore.RED}❌ Validate State Machine Definition Process Failed: {e}{Style.RESET_ALL}")
            return False

        validation_result = response.get('result')
        if validation_result == "OK":
            print(f"{Fore.GREEN}✅ State Machine definition is valid{Style.RESET_ALL}")
            for diag in response.get('diagnostics', []):
                print(f"{Fore.YELLOW}⚠️  {diag['severity']}: {diag['code']}, {diag['message']} at {diag['location']}{Style.RESET_ALL}")
            return True

        print(f"{Fore.RED}State Machine definition is invalid: {validation_result}{Style.RESET_ALL}")
        for diag in response.get('diagnostics', []):
            print(f"{Fore.RED}❌ {diag['severity']}: {diag['code']}, {diag['message']} at {diag['location']}{Style.RESET_ALL}")
        return False

    def save_state_machine(self, save_dir: Path, validate: bool = True) -> bool:
        """
        Write the definition and the role policy document to ``save_dir``.

        Args:
            save_dir: Directory the files are written to
            validate: Validate the definition with Step Functions before writing

        Returns:
            True if the files were written, False if validation failed
        """
        if validate and not self.validate_definition():
            return False

        save_dir = Path(save_dir)
        asl_output_path = save_dir / DEFINITION_FILE_NAME
        policy_output_path = save_dir / ROLE_POLICY_FILE_NAME
        with open(asl_output_path, "w") as f:
            json.dump(self.definition, f, indent=2)
        with open(policy_output_path, "w") as f:
            json.dump(self.policy_document(), f, indent=2)
        print(f"{Fore.GREEN}✅ State Machine saved to {asl_output_path}{Style.RESET_ALL}")
        print(f"{Fore.GREEN}✅ Role Policy saved to {policy_output_path}{Style.RESET_ALL}")
        return True
