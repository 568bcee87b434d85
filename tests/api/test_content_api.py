"""Content validation route: POST /api/v1/content/validate."""


def _payload(confidence=0.9) -> dict:
    return {
        "content": {
            "productId": "sku-100",
            "title": "Desk lamp",
            "description": "LED desk lamp",
            "claims": [{
                "id": "5d1f0a1e-9a8f-4a52-9a57-1f7b1a3f2c10",
                "statement": "Made from 80% recycled aluminium",
                "sourceUrl": "https://example.com/lca-report",
                "category": "sustainability",
                "confidence": confidence,
                "createdAt": "2026-02-01T10:00:00Z",
            }],
        },
        "policy": {
            "minConfidence": 0.7,
            "allowedCategories": ["sustainability"],
            "requireSourceForCategories": ["sustainability"],
            "maxClaimsPerProduct": 5,
        },
    }


async def test_valid_content(client):
    response = await client.post("/api/v1/content/validate", json=_payload())
    assert response.status_code == 200
    assert response.json()["valid"] is True


async def test_policy_violation(client):
    response = await client.post("/api/v1/content/validate", json=_payload(confidence=0.5))
    body = response.json()
    assert body["valid"] is False
    assert body["errors"][0]["code"] == "POLICY_MIN_CONFIDENCE"
    assert body["errors"][0]["path"] == "claims.0.confidence"
