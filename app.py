"""
Streamlit page for exporting schema documentation from the browser.
"""
import streamlit as st

from catalog.schema import get_schema_summary
from config import DIALECTS, load_config
from errors import ExportError
from exporter import build_document

# Set page configuration
st.set_page_config(
    page_title="Schema Document Exporter",
    page_icon="📄",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Initialize session state
if "export_result" not in st.session_state:
    st.session_state.export_result = None

if "export_schema" not in st.session_state:
    st.session_state.export_schema = None


def connection_defaults() -> dict:
    """
    Default form values: Streamlit secrets when deployed, else DBDOC_* settings.

    Returns:
        Dictionary with url, user, password, schema and dialect
    """
    config = load_config()
    defaults = {
        "url": config.url or "",
        "user": config.user or "",
        "password": config.password or "",
        "schema": config.schema or "",
        "dialect": config.dialect or "",
    }
    try:
        # When deployed on Streamlit Cloud
        for name in defaults:
            key = f"DBDOC_{name.upper()}"
            if key in st.secrets:
                defaults[name] = st.secrets[key]
    except Exception:
        # No secrets file when running locally
        pass
    return defaults


def run_export(url: str, user: str, password: str, schema: str, dialect: str):
    """
    Build the document for the form values.

    Returns:
        Tuple of (ExportResult or None, error message or None)
    """
    try:
        config = load_config(
            url=url,
            user=user or None,
            password=password,
            schema=schema,
            dialect=dialect or None,
        ).validate()
        return build_document(config), None
    except ExportError as e:
        return None, str(e)


def main():
    """Main application function."""
    st.title("Schema Document Exporter")
    st.write("Export the tables and columns of a MySQL/Doris or PostgreSQL/Kingbase schema to a Word document.")

    defaults = connection_defaults()

    with st.sidebar:
        st.header("Database Connection")
        with st.form("connection"):
            url = st.text_input("Database URL", value=defaults["url"], placeholder="jdbc:mysql://host:9030/db")
            user = st.text_input("User", value=defaults["user"])
            password = st.text_input("Password", value=defaults["password"], type="password")
            schema = st.text_input("Schema", value=defaults["schema"])
            dialect_options = ["", *DIALECTS]
            dialect = st.selectbox(
                "Dialect (blank = infer from URL)",
                dialect_options,
                index=dialect_options.index(defaults["dialect"]) if defaults["dialect"] in dialect_options else 0,
            )
            submitted = st.form_submit_button("Generate document")

    if submitted:
        with st.spinner("Reading catalog..."):
            result, error = run_export(url, user, password, schema, dialect)
        if error:
            st.session_state.export_result = None
            st.error(error)
        else:
            st.session_state.export_result = result
            st.session_state.export_schema = schema
            st.success(f"Rendered {result.table_count} tables ({result.column_count} columns)")

    result = st.session_state.export_result
    if result is None:
        st.info("Fill in the connection form in the sidebar to generate a document.")
        return

    schema = st.session_state.export_schema
    col1, col2 = st.columns(2)
    with col1:
        st.download_button(
            "Download .docx",
            data=result.renderer.to_bytes(),
            file_name=f"{schema}.docx",
            mime="application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        )
    with col2:
        st.download_button(
            "Download data dictionary (.csv)",
            data=result.dictionary.to_csv(index=False).encode("utf-8-sig"),
            file_name=f"{schema}_dictionary.csv",
            mime="text/csv",
        )

    st.subheader("Data dictionary")
    st.dataframe(result.dictionary, use_container_width=True)

    with st.expander("Schema summary"):
        st.text(get_schema_summary(result.pairs))


if __name__ == "__main__":
    main()
