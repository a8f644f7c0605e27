from pathlib import Path

TEMPLATE = Path(__file__).resolve().parent.parent / "template.yaml"


def _resource_block(text, name):
    lines = text.splitlines()
    start = lines.index(f"  {name}:")
    block = [lines[start]]
    for line in lines[start + 1:]:
        if line.startswith("  ") and not line.startswith("    "):
            break
        block.append(line)
    return "\n".join(block)


def test_verify_function_runs_in_a_single_container():
    block = _resource_block(TEMPLATE.read_text(encoding="utf-8"), "VerifyPaymentFunction")

    assert "Handler: verify_payment.lambda_handler" in block
    assert "ReservedConcurrentExecutions: 1" in block
    assert "Path: /verify-paypal-payment" in block
