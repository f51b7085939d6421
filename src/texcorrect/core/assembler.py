from typing import Sequence

from texcorrect.core.classifier import CorrectableChunk, Preserved, Segment
from texcorrect.exceptions import AssemblyError


class Assembler:
    def assemble(self, preamble: str, segments: Sequence[Segment], trailer: str) -> str:
        """
        Rebuild the document: preamble, then the segments in order, then the trailer.

        Preserved lines and corrected chunks each get a trailing newline. The
        trailer always comes last, wherever the end sentinel stood.
        """
        output = [preamble]

        for segment in segments:
            if isinstance(segment, Preserved):
                output.append(segment.line + "\n")
            elif isinstance(segment, CorrectableChunk):
                if segment.corrected is None:
                    raise AssemblyError(f"Chunk was never corrected: {segment.text[:40]!r}")
                output.append(segment.corrected + "\n")
            else:
                raise AssemblyError(f"Unknown segment type: {type(segment).__name__}")

        output.append(trailer)
        return "".join(output)
