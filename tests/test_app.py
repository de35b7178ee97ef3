import json

from conftest import FakeCapability, text_reply


def test_structured_request_with_failed_generation(make_client, failing_llm):
    client = make_client(failing_llm)
    res = client.post("/api/email/generate", json={
        "name": "Asha",
        "jobRole": "Backend Developer",
        "company": "Acme",
        "userEmail": "asha@x.com",
    })

    assert res.status_code == 200
    data = res.get_json()
    assert data["success"] is True
    assert data["parsedInput"]["name"] == "Asha"
    assert data["parsedInput"]["hrName"] == "HR Manager"
    assert data["parsedInput"]["hrEmail"] == "hr@acme.com"

    generated = data["generated"]
    assert generated["subject"] == "Application for Backend Developer – Asha"
    assert "Dear HR Manager," in generated["body"]
    assert "Acme" in generated["body"]
    assert "asha@x.com" in generated["body"]
    assert len(failing_llm.calls) == 1


def test_structured_request_with_model_output(make_client):
    llm = FakeCapability(text_reply(json.dumps({"subject": "Hello", "body": "Dear HR Manager,\r\nHi"})))
    res = make_client(llm).post("/api/email/generate", json={"name": "Asha"})

    assert res.status_code == 200
    assert res.get_json()["generated"] == {"subject": "Hello", "body": "Dear HR Manager,\nHi"}


def test_free_text_input_object(make_client, failing_llm):
    client = make_client(failing_llm)
    res = client.post("/api/email/generate", json={"input": "Apply for backend developer at Initech"})

    assert res.status_code == 200
    data = res.get_json()
    assert data["parsedInput"]["jobRole"].lower() == "backend developer"
    assert data["parsedInput"]["company"] == "Initech"
    assert "Initech" in data["generated"]["body"]
    # extraction then generation
    assert len(failing_llm.calls) == 2


def test_free_text_json_string(make_client, failing_llm):
    res = make_client(failing_llm).post(
        "/api/email/generate",
        data=json.dumps("Apply for backend developer at Initech"),
        content_type="application/json",
    )

    assert res.status_code == 200
    parsed = res.get_json()["parsedInput"]
    assert parsed["jobRole"].lower() == "backend developer"
    assert parsed["company"] == "Initech"


def test_empty_body_gets_defaults(make_client, failing_llm):
    res = make_client(failing_llm).post("/api/email/generate")

    assert res.status_code == 200
    data = res.get_json()
    assert data["parsedInput"]["name"] == "Candidate"
    assert data["generated"]["subject"] == "Application for Software Engineer – Candidate"


def test_unexpected_body_is_internal_error(make_client, failing_llm):
    res = make_client(failing_llm).post("/api/email/generate", json=[1, 2, 3])

    assert res.status_code == 500
    data = res.get_json()
    assert data["success"] is False
    assert data["message"] == "Internal Server Error"
    assert "list" in data["error"]


def test_health(make_client):
    res = make_client(None).get("/api/health")
    assert res.status_code == 200
    assert res.get_json() == {"status": "ok"}


def test_free_text_hr_email_follows_extracted_company(make_client):
    extraction = text_reply('{"name": "Ravi", "jobRole": "Data Analyst", "company": "Globex", "location": "Pune"}')
    llm = FakeCapability(extraction, ConnectionError("provider unreachable"))
    res = make_client(llm).post("/api/email/generate",
                                json={"input": "I am Ravi applying for Data Analyst with Globex"})

    assert res.status_code == 200
    # the regex saw no "at <company>"
    assert res.get_json()["parsedInput"]["company"] == "the company"
    prompt = llm.calls[1]["prompt"]
    assert "- Company: Globex" in prompt
    assert "- HR Email: hr@globex.com" in prompt


def test_free_text_hr_email_follows_regex_company(make_client, failing_llm):
    res = make_client(failing_llm).post("/api/email/generate",
                                        json={"input": "Apply for backend developer at Initech"})

    assert res.get_json()["parsedInput"]["hrEmail"] == "hr@initech.com"
    assert "HR Email: hr@initech.com" in failing_llm.calls[1]["prompt"]


def test_supplied_hr_email_is_kept(make_client, failing_llm):
    make_client(failing_llm).post("/api/email/generate", json={"company": "Acme", "hrEmail": "talent@acme.io"})
    assert "HR Email: talent@acme.io" in failing_llm.calls[0]["prompt"]


def test_malformed_json_is_internal_error(make_client, failing_llm):
    res = make_client(failing_llm).post("/api/email/generate", data='{"name": "Asha",',
                                        content_type="application/json")

    assert res.status_code == 500
    data = res.get_json()
    assert data["success"] is False
    assert data["message"] == "Internal Server Error"
    assert failing_llm.calls == []
