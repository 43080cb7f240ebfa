from __future__ import annotations

import logging
from typing import Any, Callable, Mapping, Sequence

from ._client import MetadataClient
from ._config import Settings, client_from_settings
from ._description import NODE_DESCRIPTION, parameter_default, visible_parameters
from ._errors import NodeOperationError, UnknownOperationError
from ._items import NodeItem
from ._operations import Operation, resolve_params, run_operation
from ._parameters import ParameterResolver

__all__ = ["YoutubeVideosNode", "detailed_error_message"]

logger = logging.getLogger(__name__)


def detailed_error_message(error: BaseException, operation: Any, params: Mapping[str, Any]) -> str:
    """``Error in operation 'search' with parameters [operation: search, keywords: cats, pageCount: 2]: <cause>``."""
    details = ", ".join(f"{key}: {value}" for key, value in params.items())
    return f"Error in operation '{operation}' with parameters [{details}]: {error}"


class YoutubeVideosNode:
    """Fetch YouTube metadata for a batch of input items.

    Every item selects one :class:`~ytvideos_node.Operation` through the
    parameter resolver. Items are processed one at a time, in order, against
    a single :class:`MetadataClient` created for the run and closed when it
    ends.

    Args:
        client_factory (Callable[[], MetadataClient], optional):
            Builds the client for one run. Defaults to a client configured
            from :meth:`Settings.from_env`.

    Examples:
         node = YoutubeVideosNode()
         out = node.execute(
             [{}],
             NodeParameters({"operation": "search", "keywords": "cats", "pageCount": 2}),
         )
         [item.json["title"] for item in out]
    """

    description = NODE_DESCRIPTION

    def __init__(self, client_factory: Callable[[], MetadataClient] | None = None):
        self._client_factory = client_factory or (lambda: client_from_settings(Settings.from_env()))

    def execute(
            self,
            items: Sequence[Mapping[str, Any]],
            parameters: ParameterResolver,
            continue_on_fail: bool = False,
    ) -> list[NodeItem]:
        """Run the node over *items*.

        Args:
            items (Sequence[Mapping[str, Any]]):
                Input records. Only read, through *parameters*.
            parameters (ParameterResolver):
                Per-item parameter lookup.
            continue_on_fail (bool):
                ``True`` turns a failing item into an error record and moves
                on; ``False`` aborts the run at the first failure.

        Returns:
            list[NodeItem]: Output records in input order, each tagged with
            the index of its input item.

        Raises:
            NodeOperationError: An item failed and *continue_on_fail* is off.
                ``item_index`` names the item; ``__cause__`` the original error.
        """
        return_data: list[NodeItem] = []

        with self._client_factory() as youtube:
            for item_index in range(len(items)):
                try:
                    params = resolve_params(parameters, item_index)
                    logger.debug("item %d: %s", item_index, params)
                    records = run_operation(youtube, params)
                except Exception as error:  # noqa: BLE001
                    operation, raw_params = self._raw_parameters(parameters, item_index)
                    message = detailed_error_message(error, operation, raw_params)

                    if not continue_on_fail:
                        raise NodeOperationError(message, item_index=item_index) from error

                    logger.warning("item %d failed, continuing: %s", item_index, message)
                    return_data.append(NodeItem({"error": message}, item_index, error=error))
                    continue

                return_data.extend(NodeItem(record, item_index) for record in records)

        failed = sum(1 for item in return_data if item.failed)
        logger.info("processed %d items into %d records (%d failed)", len(items), len(return_data), failed)
        return return_data

    @staticmethod
    def _raw_parameters(parameters: ParameterResolver, item_index: int) -> tuple[Any, dict[str, Any]]:
        """Parameters as the host supplied them, for error messages.

        Read again without validation so the message can be built even when
        resolving them was what failed.
        """
        def lookup(name: str) -> Any:
            try:
                return parameters.get_parameter(name, item_index, parameter_default(name))
            except Exception as exc:  # noqa: BLE001
                return f"<unavailable: {exc}>"

        operation = lookup("operation")
        if isinstance(operation, Operation):
            operation = operation.value
        raw: dict[str, Any] = {"operation": operation}
        try:
            op = Operation.coerce(operation)
        except UnknownOperationError:
            return operation, raw
        for name in visible_parameters(op.value):
            raw[name] = lookup(name)
        return operation, raw
