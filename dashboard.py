import os
import time
import uuid

import requests
import streamlit as st

BACKEND_URL = os.getenv("SUPPORT_BACKEND_URL", "http://localhost:3001")
USER_ID_PARAM = "uid"


def get_user_id():
    """Стабильный userId: берём из query-параметра, иначе создаём и запоминаем в URL."""
    uid = st.query_params.get(USER_ID_PARAM)
    if not uid:
        uid = f"user-{int(time.time() * 1000)}-{uuid.uuid4().hex[:6]}"
        st.query_params[USER_ID_PARAM] = uid
    return uid


def _json_or_none(resp):
    """Тело ответа как JSON; None, если прокси вернул HTML или пустое тело."""
    try:
        return resp.json()
    except ValueError:
        return None


def fetch_history(user_id):
    try:
        resp = requests.get(f"{BACKEND_URL}/api/history/{user_id}", timeout=10)
        resp.raise_for_status()
        return resp.json().get("messages", [])
    except Exception as e:
        st.error(f"Не удалось загрузить историю: {e}")
        return []


def fetch_faqs():
    try:
        resp = requests.get(f"{BACKEND_URL}/api/admin/faqs", timeout=10)
        resp.raise_for_status()
        return resp.json()
    except Exception as e:
        st.error(f"Не удалось загрузить FAQ: {e}")
        return []


def send_message(user_id, text):
    """Возвращает текст ответа бота или текст ошибки, как в исходном фронтенде."""
    try:
        resp = requests.post(
            f"{BACKEND_URL}/api/chat",
            json={"userId": user_id, "message": text},
            timeout=60,
        )
    except requests.RequestException:
        return "Error: Could not connect to the server."
    body = _json_or_none(resp)
    if not resp.ok or not isinstance(body, dict):
        return "Error: Could not get a response."
    return body.get("response", "")


def upload_faq(question, answer, tags):
    try:
        resp = requests.post(
            f"{BACKEND_URL}/api/admin/upload-faq",
            json={"question": question, "answer": answer, "tags": tags},
            timeout=10,
        )
    except requests.RequestException:
        return False, "Error connecting to the server for FAQ upload."
    if resp.status_code == 201:
        return True, "FAQ uploaded successfully!"
    body = _json_or_none(resp)
    detail = body.get("error") if isinstance(body, dict) else None
    return False, f"Error uploading FAQ: {detail or resp.text}"


# --- Streamlit UI ---
def main():
    st.set_page_config(page_title="Smart-Support", layout="wide")
    user_id = get_user_id()

    if "messages" not in st.session_state:
        st.session_state.messages = fetch_history(user_id)

    chat_col, admin_col = st.columns([2, 1])

    with chat_col:
        st.title("💬 Smart-Support")
        for msg in st.session_state.messages:
            role = "user" if msg.get("sender") == "user" else "assistant"
            with st.chat_message(role):
                st.write(msg.get("text", ""))

        prompt = st.chat_input("Type your message...")
        if prompt and prompt.strip():
            st.session_state.messages.append({"sender": "user", "text": prompt})
            with st.spinner("Typing..."):
                reply = send_message(user_id, prompt)
            st.session_state.messages.append({"sender": "bot", "text": reply})
            st.rerun()

        st.caption(f"Your User ID: {user_id}")

    with admin_col:
        st.subheader("🛠️ FAQ admin")
        with st.form("faq_upload", clear_on_submit=True):
            question = st.text_input("Question")
            answer = st.text_area("Answer")
            tags_raw = st.text_input("Tags (comma separated)")
            submitted = st.form_submit_button("Upload FAQ")
        if submitted:
            if not question.strip() or not answer.strip():
                st.warning("Both question and answer are required for FAQ.")
            else:
                tags = [t.strip() for t in tags_raw.split(",") if t.strip()]
                ok, note = upload_faq(question, answer, tags)
                (st.success if ok else st.error)(note)

        st.divider()
        for faq in fetch_faqs():
            with st.expander(faq.get("question", "")):
                st.write(faq.get("answer", ""))
                if faq.get("tags"):
                    st.caption(", ".join(faq["tags"]))


# `streamlit run dashboard.py` исполняет файл как __main__
if __name__ == "__main__":
    main()
