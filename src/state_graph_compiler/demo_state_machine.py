from pathlib import Path
from typing import Optional

from colorama import Fore, Style

from state_graph_compiler.errors import StateGraphError
from state_graph_compiler.policy import lambda_function_resource, sns_publish_resource
from state_graph_compiler.scope import Scope
from state_graph_compiler.state_machine import StateMachine
from state_graph_compiler.states import Choice, Condition, Errors, Fail, Map, Parallel, Pass, Succeed, Task, Wait
from state_graph_compiler.visualizer.graph_visualizer import GraphVisualizer

DEMO_ACCOUNT = "123456789012"
DEMO_REGION = "us-west-2"


def _function_arn(name: str) -> str:
    return f"arn:aws:lambda:{DEMO_REGION}:{DEMO_ACCOUNT}:function:{name}"


def build_order_pipeline(scope: Scope):
    """Build the demo definition: validate, fan out, poll for shipping, notify."""
    validate = Task(scope, "ValidateOrder", lambda_function_resource(_function_arn("validate_order")))
    validate.add_retry(errors=[Errors.TASK_FAILED], interval_seconds=2, max_attempts=2)
    rejected = Fail(scope, "OrderRejected", error="InvalidOrder", cause="Order failed validation")
    validate.add_catch(rejected, errors=[Errors.ALL], result_path="$.error")

    branches = Scope("Fulfilment", scope)
    reserve = Task(branches, "ReserveStock", lambda_function_resource(_function_arn("reserve_stock")))
    charge = Task(branches, "ChargeCard", lambda_function_resource(_function_arn("charge_card")))
    fulfil = Parallel(scope, "Fulfil", result_path="$.fulfilment").branch(reserve.end(), charge.end())

    items = Scope("Items", scope)
    pack_item = Task(items, "PackItem", lambda_function_resource(_function_arn("pack_item")))
    pack_all = Map(scope, "PackItems", items_path="$.items", max_concurrency=5).iterator(pack_item.end())

    wait = Wait(scope, "WaitForCarrier", seconds=30)
    check = Task(scope, "CheckShipment", lambda_function_resource(_function_arn("check_shipment")))
    shipped = Choice(scope, "IsShipped")
    notify = Task(
        scope,
        "NotifyCustomer",
        sns_publish_resource(f"arn:aws:sns:{DEMO_REGION}:{DEMO_ACCOUNT}:orders"),
        parameters={"Message.$": "$.summary"},
    )
    done = Succeed(scope, "Done")

    shipped.when(Condition.boolean_equals("$.shipped", True), notify.next(done))
    shipped.otherwise(wait)
    already_packed = Pass(scope, "AlreadyPacked", result={"packed": True}, result_path="$.packing")

    route = Choice(scope, "NeedsPacking")
    route.when(Condition.is_present("$.items"), pack_all)
    route.otherwise(already_packed)

    return (
        validate.next(fulfil)
        .next(route.afterwards())
        .next(wait)
        .next(check)
        .next(shipped)
    )


def main(save_dir: Optional[Path] = None, validate: bool = False):
    """Compile the demo definition, print it as a tree and optionally save it."""
    root = Scope("OrderPipeline")
    try:
        state_machine = StateMachine(
            build_order_pipeline(root),
            role_arn=f"arn:aws:iam::{DEMO_ACCOUNT}:role/OrderPipelineRole",
            state_machine_name="OrderPipeline",
            timeout_seconds=3600,
        )
    except StateGraphError as e:
        print(f"{Fore.RED}❌ Failed to compile state machine: {e}{Style.RESET_ALL}")
        return None

    print(GraphVisualizer().visualize(state_machine.definition, title="OrderPipeline"))
    print(f"\n{Fore.CYAN}Role policy statements:{Style.RESET_ALL}")
    for statement in state_machine.policy_statements:
        print(f"  {statement.effect} {', '.join(statement.actions)} on {', '.join(statement.resources)}")

    if save_dir is not None:
        state_machine.save_state_machine(Path(save_dir), validate=validate)
    return state_machine


if __name__ == "__main__":
    main()
