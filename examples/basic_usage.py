"""Basic usage examples for the Cognee Python client."""

import asyncio

from cognee_client import ClientConfig, CogneeClient, CogneeError, NotFoundError, SearchType


async def basic_example():
    """Ingest, cognify and search."""
    async with CogneeClient(base_url="http://localhost:8000", api_key="your-api-key") as client:
        # Upload a document
        run = await client.add(
            [("notes.txt", b"Cognee turns documents into knowledge graphs.", "text/plain")],
            dataset_name="research",
        )
        print(f"Ingested into dataset {run.dataset_name} ({run.status})")

        # Build the graph
        runs = await client.cognify(datasets=["research"])
        for dataset_id, info in runs.items():
            print(f"Cognify {dataset_id}: {info.status}")

        # Ask a question
        results = await client.search(
            "what does Cognee do?",
            search_type=SearchType.GRAPH_COMPLETION,
            datasets=["research"],
        )
        for result in results:
            print(result)


async def login_example():
    """Log in and inspect datasets."""
    async with CogneeClient(ClientConfig.from_env()) as client:
        await client.login("default_user@example.com", "default_password")
        user = await client.get_current_user()
        print(f"Logged in as {user.email}")

        for dataset in await client.get_datasets():
            graph = await client.get_dataset_graph(dataset.id)
            print(f"{dataset.name}: {len(graph.nodes)} nodes, {len(graph.edges)} edges")


async def error_handling_example():
    """Handle API errors."""
    async with CogneeClient() as client:
        try:
            await client.get_dataset_graph("00000000-0000-0000-0000-000000000000")
        except NotFoundError as e:
            print(f"Not found: {e.message}")
        except CogneeError as e:
            print(f"Request failed ({e.status_code}): {e.message}")


if __name__ == "__main__":
    asyncio.run(basic_example())
