import uuid


async def create_category(client, organization, name, parent_id=None, category_type="expense"):
    payload = {"name": name, "type": category_type, "organizationId": str(organization.id)}
    if parent_id:
        payload["parentId"] = parent_id
    return await client.post("/api/transaction-categories", json=payload)


async def test_category_levels(client, organization):
    food = (await create_category(client, organization, "Food")).json()
    groceries = (await create_category(client, organization, "Groceries", food["id"])).json()
    produce = (await create_category(client, organization, "Produce", groceries["id"])).json()

    assert (food["level"], groceries["level"], produce["level"]) == (1, 2, 3)
    assert produce["parentId"] == groceries["id"]

    too_deep = await create_category(client, organization, "Apples", produce["id"])
    assert too_deep.status_code == 400


async def test_category_parent_must_share_organization(client, repo, organization):
    other = await repo.organization.create_with_admin(name="Other", description=None, created_by=uuid.uuid4())
    foreign = await repo.category.create(organization_id=other.id, name="Food", transaction_type="expense")

    response = await create_category(client, organization, "Groceries", str(foreign.id))

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid parent category ID"}


async def test_categories_filter_by_type(client, organization):
    await create_category(client, organization, "Salary", category_type="income")
    await create_category(client, organization, "Rent")

    response = await client.get(
        "/api/transaction-categories", params={"organizationId": str(organization.id), "type": "income"}
    )

    assert [category["name"] for category in response.json()] == ["Salary"]


async def test_transactions(client, organization, user_id):
    salary = (await create_category(client, organization, "Salary", category_type="income")).json()
    rent = (await create_category(client, organization, "Rent")).json()
    card = (
        await client.post(
            "/api/payment-methods",
            json={"name": "Debit", "type": "card", "lastFourDigits": "1234", "organizationId": str(organization.id)},
        )
    ).json()

    for payload in (
        {"categoryId": salary["id"], "amount": 4200, "transactionType": "income", "transactionDate": "2024-05-01"},
        {"categoryId": rent["id"], "amount": "1,100.00", "transactionType": "expense", "transactionDate": "2024-05-03",
         "paymentMethodId": card["id"]},
    ):
        response = await client.post(
            "/api/transactions", json={**payload, "organizationId": str(organization.id), "userId": str(user_id)}
        )
        assert response.status_code == 201

    everything = await client.get("/api/transactions", params={"organizationId": str(organization.id)})
    assert [transaction["amount"] for transaction in everything.json()] == [1100.0, 4200.0]

    expenses = await client.get(
        "/api/transactions", params={"organizationId": str(organization.id), "type": "expense"}
    )
    assert [transaction["paymentMethodId"] for transaction in expenses.json()] == [card["id"]]

    early = await client.get(
        "/api/transactions", params={"organizationId": str(organization.id), "endDate": "2024-05-02"}
    )
    assert [transaction["transactionType"] for transaction in early.json()] == ["income"]


async def test_transaction_category_must_share_organization(client, repo, organization, user_id):
    other = await repo.organization.create_with_admin(name="Other", description=None, created_by=uuid.uuid4())
    foreign = await repo.category.create(organization_id=other.id, name="Food", transaction_type="expense")

    response = await client.post(
        "/api/transactions",
        json={
            "categoryId": str(foreign.id),
            "amount": 10,
            "transactionType": "expense",
            "organizationId": str(organization.id),
            "userId": str(user_id),
        },
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid category ID"}


async def test_payment_method_scope(client, organization):
    method = (
        await client.post(
            "/api/payment-methods", json={"name": "Wallet", "type": "cash", "organizationId": str(organization.id)}
        )
    ).json()

    mismatched = await client.put(
        "/api/payment-methods", json={"id": method["id"], "organizationId": str(uuid.uuid4()), "name": "Purse"}
    )
    assert mismatched.status_code == 404
    assert mismatched.json() == {"error": "Payment method not found or access denied"}

    deactivated = await client.put(
        "/api/payment-methods", json={"id": method["id"], "organizationId": str(organization.id), "isActive": False}
    )
    assert deactivated.json()["isActive"] is False

    active = await client.get(
        "/api/payment-methods", params={"organizationId": str(organization.id), "activeOnly": "true"}
    )
    assert active.json() == []


async def test_invalid_last_four_digits(client, organization):
    response = await client.post(
        "/api/payment-methods",
        json={"name": "Card", "type": "card", "lastFourDigits": "12a4", "organizationId": str(organization.id)},
    )

    assert response.status_code == 400


async def test_liabilities(client, organization, user_id):
    created = await client.post(
        "/api/liabilities",
        json={
            "name": "Mortgage",
            "type": "mortgage",
            "currentAmount": 180000,
            "interestRate": "3.25",
            "dueDate": "2045-01-01",
            "organizationId": str(organization.id),
            "createdBy": str(user_id),
        },
    )

    assert created.status_code == 201
    assert created.json()["interestRate"] == 3.25

    listing = await client.get("/api/liabilities", params={"organizationId": str(organization.id)})
    assert [liability["name"] for liability in listing.json()] == ["Mortgage"]


async def test_dashboard_counts(client, organization, asset_category):
    await create_category(client, organization, "Rent")
    await client.post(
        "/api/assets",
        json={
            "name": "Cash",
            "categoryId": str(asset_category.id),
            "currentValue": 20,
            "organizationId": str(organization.id),
        },
    )

    response = await client.get("/api/dashboard-simple", params={"organizationId": str(organization.id)})

    assert response.status_code == 200
    body = response.json()
    assert body["counts"] == {"assets": 1, "transactions": 0, "categories": 1}
    assert body["organizationId"] == str(organization.id)
    assert "timestamp" in body


async def create_transaction(client, organization, user_id, category_id, **data):
    payload = {
        "categoryId": category_id,
        "amount": 25,
        "transactionType": "expense",
        "transactionDate": "2024-05-01",
        "organizationId": str(organization.id),
        "userId": str(user_id),
        **data,
    }
    return await client.post("/api/transactions", json=payload)


async def test_update_transaction(client, organization, user_id):
    food = (await create_category(client, organization, "Food")).json()
    transaction = (await create_transaction(client, organization, user_id, food["id"])).json()

    mismatched = await client.put(
        "/api/transactions", json={"id": transaction["id"], "organizationId": str(uuid.uuid4()), "amount": 30}
    )
    assert mismatched.status_code == 404
    assert mismatched.json() == {"error": "Transaction not found or access denied"}

    updated = await client.put(
        "/api/transactions",
        json={
            "id": transaction["id"],
            "organizationId": str(organization.id),
            "amount": "30.50",
            "description": "Market",
        },
    )
    assert updated.status_code == 200
    assert updated.json()["amount"] == 30.5
    assert updated.json()["description"] == "Market"
    assert updated.json()["categoryId"] == food["id"]


async def test_update_transaction_rejects_foreign_category(client, repo, organization, user_id):
    food = (await create_category(client, organization, "Food")).json()
    transaction = (await create_transaction(client, organization, user_id, food["id"])).json()
    other = await repo.organization.create_with_admin(name="Other", description=None, created_by=uuid.uuid4())
    foreign = await repo.category.create(organization_id=other.id, name="Travel", transaction_type="expense")

    response = await client.put(
        "/api/transactions",
        json={"id": transaction["id"], "organizationId": str(organization.id), "categoryId": str(foreign.id)},
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid category ID"}

    listing = await client.get("/api/transactions", params={"organizationId": str(organization.id)})
    assert [item["categoryId"] for item in listing.json()] == [food["id"]]


async def test_delete_transaction(client, organization, user_id):
    food = (await create_category(client, organization, "Food")).json()
    transaction = (await create_transaction(client, organization, user_id, food["id"])).json()

    mismatched = await client.delete(
        "/api/transactions", params={"id": transaction["id"], "organizationId": str(uuid.uuid4())}
    )
    assert mismatched.status_code == 404
    assert mismatched.json() == {"error": "Transaction not found or access denied"}

    deleted = await client.delete(
        "/api/transactions", params={"id": transaction["id"], "organizationId": str(organization.id)}
    )
    assert deleted.status_code == 200
    assert deleted.json() == {"message": "Transaction deleted successfully"}

    listing = await client.get("/api/transactions", params={"organizationId": str(organization.id)})
    assert listing.json() == []


async def test_transaction_date_format(client, organization, user_id):
    food = (await create_category(client, organization, "Food")).json()

    trailing = await create_transaction(client, organization, user_id, food["id"], transactionDate="2024-05-01garbage")
    assert trailing.status_code == 400
    assert trailing.json() == {"error": "Invalid transaction date. Use the YYYY-MM-DD format."}

    timestamp = await create_transaction(
        client, organization, user_id, food["id"], transactionDate="2024-05-01T10:00:00Z"
    )
    assert timestamp.status_code == 201
    assert timestamp.json()["transactionDate"] == "2024-05-01"


async def test_payment_method_rejects_non_boolean_is_active(client, organization):
    method = (
        await client.post(
            "/api/payment-methods", json={"name": "Wallet", "type": "cash", "organizationId": str(organization.id)}
        )
    ).json()

    response = await client.put(
        "/api/payment-methods", json={"id": method["id"], "organizationId": str(organization.id), "isActive": "false"}
    )
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid isActive. Must be a boolean."}

    active = await client.get(
        "/api/payment-methods", params={"organizationId": str(organization.id), "activeOnly": "true"}
    )
    assert [item["id"] for item in active.json()] == [method["id"]]


async def test_payment_method_rejects_non_string_name(client, organization):
    response = await client.post(
        "/api/payment-methods", json={"name": 5, "type": "cash", "organizationId": str(organization.id)}
    )

    assert response.status_code == 400
    assert response.json() == {"error": "Invalid name. Must be a string."}
