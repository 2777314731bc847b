"""
Basic usage: a user-profile schema generated against a local Ollama server.

Requires a running Ollama with the model pulled:
    ollama pull qwen2.5:7b
"""

from gannicus import (
    GenerateOptions,
    ProviderConfig,
    define_schema,
    derived,
    enum_field,
    export_records,
    generate_sync,
    llm,
    number,
)


def build_schema():
    return define_schema(
        name=llm("A realistic full name"),
        age=number(18, 65),
        role=enum_field([("User", 70), ("Admin", 25), ("Owner", 5)]),
        email=derived(
            ["name"],
            lambda ctx: ctx["name"].lower().replace(" ", ".") + "@example.com",
        ),
        bio=llm("A one-sentence professional bio", coherence=["name", "role"]),
    )


def main():
    print("=== Basic Generation Example ===\n")

    result = generate_sync(build_schema(), GenerateOptions(
        count=10,
        provider=ProviderConfig(name="ollama", model="qwen2.5:7b"),
        seed=42,
        on_progress=lambda current, total: print(f"  {current}/{total}"),
    ))

    print(f"\nGenerated {result.stats.total_records} records")
    print(f"LLM values: {result.stats.llm_calls} ({result.stats.cache_hits} from cache)")
    print(f"Duration: {result.stats.duration_ms / 1000:.1f}s\n")

    for record in result.data[:3]:
        print(record)

    export_records(result.data, "data/outputs/users.csv")


if __name__ == "__main__":
    main()
