"""Starter templates and their initial artifacts."""

from dataclasses import dataclass

from site_builder_mcp.core.errors import TemplateResolutionError
from site_builder_mcp.prompts.system import ARTIFACT_FORMAT_PROMPT

# Files the sandbox keeps that are never shown to the model.
HIDDEN_FILES = (".gitignore", "package-lock.json")

NODE_BASE_ARTIFACT = """<boltArtifact id="project-import" title="Project Files">
<boltAction type="file" filePath="index.js">
// run `node index.js` in the terminal

console.log(`Hello Node.js v${process.versions.node}!`);
</boltAction>
<boltAction type="file" filePath="package.json">
{
  "name": "node-starter",
  "private": true,
  "scripts": {
    "test": "echo \\"Error: no test specified\\" && exit 1"
  }
}
</boltAction>
</boltArtifact>"""

REACT_BASE_ARTIFACT = """<boltArtifact id="project-import" title="Project Files">
<boltAction type="file" filePath="index.html">
<!doctype html>
<html lang="en">
  <head>
    <meta charset="UTF-8" />
    <meta name="viewport" content="width=device-width, initial-scale=1.0" />
    <title>Vite + React + TS</title>
  </head>
  <body>
    <div id="root"></div>
    <script type="module" src="/src/main.tsx"></script>
  </body>
</html>
</boltAction>
<boltAction type="file" filePath="package.json">
{
  "name": "vite-react-typescript-starter",
  "private": true,
  "version": "0.0.0",
  "type": "module",
  "scripts": {
    "dev": "vite",
    "build": "tsc && vite build",
    "preview": "vite preview"
  },
  "dependencies": {
    "react": "^18.3.1",
    "react-dom": "^18.3.1"
  },
  "devDependencies": {
    "@types/react": "^18.3.5",
    "@types/react-dom": "^18.3.0",
    "@vitejs/plugin-react": "^4.3.1",
    "typescript": "^5.5.3",
    "vite": "^5.4.2"
  }
}
</boltAction>
<boltAction type="file" filePath="vite.config.ts">
import { defineConfig } from 'vite';
import react from '@vitejs/plugin-react';

export default defineConfig({
  plugins: [react()],
});
</boltAction>
<boltAction type="file" filePath="src/main.tsx">
import { StrictMode } from 'react';
import { createRoot } from 'react-dom/client';
import App from './App.tsx';
import './index.css';

createRoot(document.getElementById('root')!).render(
  <StrictMode>
    <App />
  </StrictMode>
);
</boltAction>
<boltAction type="file" filePath="src/App.tsx">
function App() {
  return (
    <div className="min-h-screen bg-gray-100 flex items-center justify-center">
      <p>Start prompting (or editing) to see magic happen :)</p>
    </div>
  );
}

export default App;
</boltAction>
<boltAction type="file" filePath="src/index.css">
body {
  margin: 0;
}
</boltAction>
</boltArtifact>"""


def project_context_prompt(artifact: str) -> str:
    """Builds the message that shows the model every file of the starter project."""
    hidden = "\n".join(f"  - {name}" for name in HIDDEN_FILES)
    return (
        "Here is an artifact that contains all files of the project visible to you.\n"
        "Consider the contents of ALL files in the project.\n\n"
        f"{artifact}\n\n"
        "Here is a list of files that exist on the file system but are not being shown to you:\n\n"
        f"{hidden}\n"
    )


@dataclass(frozen=True)
class ProjectTemplate:
    template_id: str
    artifact: str

    @property
    def context_prompts(self) -> tuple[str, ...]:
        """The user messages that open a conversation started from this template."""
        return (ARTIFACT_FORMAT_PROMPT, project_context_prompt(self.artifact))


TEMPLATES: dict[str, ProjectTemplate] = {
    "node": ProjectTemplate("node", NODE_BASE_ARTIFACT),
    "react": ProjectTemplate("react", REACT_BASE_ARTIFACT),
}


def resolve_template(answer: str | None) -> ProjectTemplate:
    """
    Maps a classifier answer to one of the starter templates.

    Raises:
        TemplateResolutionError: If the answer is not `node` or `react`.
    """
    template_id = (answer or "").strip().lower()
    template = TEMPLATES.get(template_id)
    if template is None:
        raise TemplateResolutionError(
            f"Invalid template answer {answer!r}. Expected one of: {', '.join(TEMPLATES)}."
        )
    return template
