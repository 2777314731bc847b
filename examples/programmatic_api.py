"""
Programmatic API: hooks, transformations, validations and error policy.

Runs against vLLM by default; set VLLM_BASE_URL to point at your server.
"""

import asyncio

from gannicus import (
    AdvancedOptions,
    GenerateOptions,
    GenerationHooks,
    ProviderConfig,
    Transformations,
    Validations,
    define_schema,
    enum_field,
    generate,
    llm,
    number,
)


SCHEMA = define_schema(
    company=llm("A tech startup name"),
    industry=enum_field(["AI", "Fintech", "Healthtech", "Climate"]),
    employees=number(5, 500),
    tagline=llm("A short marketing tagline", coherence=["company", "industry"]),
)


async def after_field(field_name, value, fld, ctx):
    if field_name == "company":
        return value.strip().title()
    return None


def validate_field(field_name, value, record):
    if field_name == "tagline":
        return 0 < len(value) <= 120
    return True


def error_handler(error, ctx):
    print(f"  ! {ctx.field_name} failed for record {ctx.record_index}: {error}")
    return "N/A"


async def main():
    print("=== Programmatic API Example ===\n")

    result = await generate(SCHEMA, GenerateOptions(
        count=20,
        provider=ProviderConfig(name="vllm", model="Qwen/Qwen2.5-7B-Instruct"),
        batch_size=5,
        hooks=GenerationHooks(
            after_field=after_field,
            on_complete=lambda r: print(f"Done: {r.stats.total_records} records"),
        ),
        transformations=Transformations(
            transform_record=lambda record, index: {**record, "id": index + 1},
            filter_record=lambda record, index: record["employees"] >= 10,
        ),
        validations=Validations(validate_field=validate_field),
        advanced=AdvancedOptions(
            max_retries=2,
            timeout=30,
            error_handler=error_handler,
        ),
    ))

    print(f"Filtered: {result.stats.filtered}")
    print(f"Errors: {len(result.errors)}")
    for record in result.data[:5]:
        print(record)


if __name__ == "__main__":
    asyncio.run(main())
